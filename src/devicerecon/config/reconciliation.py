"""Reconciliation defaults and environment overrides."""

from __future__ import annotations

from dataclasses import dataclass

from devicerecon.domain.maintenance import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_RETENTION_DAYS,
    DEFAULT_SIBLING_LIMIT,
)
from devicerecon.domain.model import MergeStrategy

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    retention_days: int = DEFAULT_RETENTION_DAYS
    merge_strategy: MergeStrategy = MergeStrategy.DEACTIVATE
    page_size: int = DEFAULT_PAGE_SIZE
    sibling_limit: int = DEFAULT_SIBLING_LIMIT
    sweep_timeout_seconds: float | None = None


def _merge_strategy_from_env() -> MergeStrategy:
    raw = optional_env_var("DEVICERECON_MERGE_STRATEGY")
    if raw is None:
        return MergeStrategy.DEACTIVATE
    try:
        return MergeStrategy(raw.lower())
    except ValueError as exc:
        choices = ", ".join(strategy.value for strategy in MergeStrategy)
        raise ConfigurationError(
            f"DEVICERECON_MERGE_STRATEGY must be one of {choices}, got {raw!r}"
        ) from exc


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        retention_days=env_int("DEVICERECON_RETENTION_DAYS", DEFAULT_RETENTION_DAYS),
        merge_strategy=_merge_strategy_from_env(),
        page_size=env_int("DEVICERECON_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        sibling_limit=env_int("DEVICERECON_SIBLING_LIMIT", DEFAULT_SIBLING_LIMIT),
        sweep_timeout_seconds=env_float("DEVICERECON_SWEEP_TIMEOUT_SECONDS"),
    )


def get_log_level_name() -> str:
    return optional_env_var("DEVICERECON_LOG_LEVEL") or "INFO"

"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError
from .reconciliation import ReconciliationConfig, get_log_level_name, get_reconciliation_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ReconciliationConfig",
    "StorageConfig",
    "env_float",
    "env_int",
    "get_database_config",
    "get_database_uri",
    "get_log_level_name",
    "get_reconciliation_config",
    "get_storage_config",
    "optional_env_var",
]

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from devicerecon.app import (
    archive_inactive_devices,
    collect_device_statistics,
    handle_device_created,
    run_cleanup_sweep,
    run_health_check,
)
from devicerecon.common import configure_logging, parse_log_level
from devicerecon.config import (
    ConfigurationError,
    ReconciliationConfig,
    get_log_level_name,
    get_reconciliation_config,
)
from devicerecon.domain.model import MergeStrategy
from devicerecon.domain.ports import DeviceStoreError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile duplicate device registrations")
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (defaults to DEVICERECON_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sweep = subparsers.add_parser("sweep", help="Deduplicate all fingerprinted devices")
    sweep.add_argument(
        "--page-size",
        type=int,
        help="Number of records to load per query (defaults to config)",
    )
    sweep.add_argument(
        "--timeout",
        type=float,
        help="Stop between fingerprint groups after this many seconds",
    )

    created = subparsers.add_parser(
        "device-created",
        help="Reconcile a newly registered device against its duplicates",
    )
    created.add_argument("device_id", type=str, help="Id of the newly committed device")
    created.add_argument(
        "--merge-strategy",
        choices=[strategy.value for strategy in MergeStrategy],
        help="How to resolve the new device when an existing one wins (defaults to config)",
    )

    archive = subparsers.add_parser("archive", help="Archive long-inactive devices")
    archive.add_argument(
        "--retention-days",
        type=int,
        help="Inactivity window in days before archiving (defaults to config)",
    )

    subparsers.add_parser("stats", help="Print device statistics")
    subparsers.add_parser("health", help="Check for active duplicate groups")

    return parser.parse_args(list(argv))


def _build_config(args: argparse.Namespace) -> ReconciliationConfig:
    config = get_reconciliation_config()
    overrides: dict[str, Any] = {}
    page_size = getattr(args, "page_size", None)
    if page_size is not None:
        if page_size < 1:
            raise ConfigurationError("--page-size must be positive")
        overrides["page_size"] = page_size
    timeout = getattr(args, "timeout", None)
    if timeout is not None:
        if timeout <= 0:
            raise ConfigurationError("--timeout must be positive")
        overrides["sweep_timeout_seconds"] = timeout
    retention_days = getattr(args, "retention_days", None)
    if retention_days is not None:
        if retention_days < 1:
            raise ConfigurationError("--retention-days must be at least 1")
        overrides["retention_days"] = retention_days
    merge_strategy = getattr(args, "merge_strategy", None)
    if merge_strategy is not None:
        overrides["merge_strategy"] = MergeStrategy(merge_strategy)
    return replace(config, **overrides)


def _run(args: argparse.Namespace, config: ReconciliationConfig) -> int:
    if args.command == "sweep":
        report = run_cleanup_sweep(config=config)
        return EXIT_OK if report.failures == 0 else EXIT_FAILED
    if args.command == "device-created":
        report = handle_device_created(args.device_id, config=config)
        log.info(
            "Duplicate check for %s: duplicate_groups=%d, deactivated=%d, deleted=%d, merged=%d",
            args.device_id,
            report.duplicate_groups,
            report.deactivated,
            report.deleted,
            report.merged,
        )
        # the registration itself has already been committed
        return EXIT_OK
    if args.command == "archive":
        archival = archive_inactive_devices(config=config)
        return EXIT_OK if archival.failures == 0 else EXIT_FAILED
    if args.command == "stats":
        stats = collect_device_statistics(config=config)
        log.info(
            "Device statistics: total=%d, active=%d, inactive=%d, archived=%d, "
            "fingerprints=%d, duplicate_groups=%d",
            stats.total,
            stats.active,
            stats.inactive,
            stats.archived,
            stats.fingerprints,
            stats.duplicate_groups,
        )
        return EXIT_OK
    if args.command == "health":
        run_health_check(config=config)
        return EXIT_OK
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    try:
        configure_logging(level=parse_log_level(parsed_args.log_level or get_log_level_name()))
        config = _build_config(parsed_args)
    except (ConfigurationError, ValueError):
        log.exception("Invalid configuration")
        sys.exit(EXIT_USAGE)

    try:
        exit_code = _run(parsed_args, config)
    except DeviceStoreError:
        log.exception("Device store unavailable, pass aborted")
        sys.exit(EXIT_FAILED)
    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

"""CLI for the ICR vulnerability scan action."""

import argparse
import os
import sys
from pathlib import Path

import structlog

from .config import Config, parse_bool_flag
from .exceptions import UsageError
from .factory import Factory
from .models.scan import OutcomeKind
from .storage import workflow


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="icr-scan",
        description=(
            "Run a Vulnerability Advisor scan of an IBM Cloud Container "
            "Registry image and wait for the result."
        ),
    )
    parser.add_argument(
        "image",
        nargs="?",
        help="image to scan, e.g. us.icr.io/namespace/image:tag",
        default=os.getenv("IMAGE", ""),
    )
    parser.add_argument(
        "-c",
        "--config-file",
        type=Path,
        help="scan config file",
        default=None,
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
        default=False,
    )
    parser.add_argument(
        "--fail-on-vulnerability",
        help=(
            "'true' to fail when the scan status is FAIL (default: "
            "$FAIL_ON_VULNERABILITY, or true)"
        ),
        default=None,
    )
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> Config:
    cfg = Config.from_file(args.config_file) if args.config_file else Config()
    cfg.apply_environment()

    # Command-line settings win over config and environment
    if args.debug:
        cfg.debug = True
    if args.fail_on_vulnerability is not None:
        cfg.policy.fail_on_vulnerability = parse_bool_flag(
            args.fail_on_vulnerability
        )
    return cfg


def main(argv: list[str] | None = None) -> int:
    """Run one scan and return the process exit code."""
    args = _parse_args(argv)
    cfg = _load_config(args)
    poller = Factory(cfg).create_scan_poller()
    logger = structlog.get_logger(__name__)

    with workflow.group("Running vulnerability scan"):
        try:
            result = poller.run(args.image, cfg.policy)
        except UsageError as e:
            logger.error(str(e))
            print("Usage: icr-scan <image>")
            workflow.error(str(e))
            return 1

        print()
        print("=== Vulnerability Scan Results ===")
        print(result.raw)
        print()

        match result.outcome.kind:
            case OutcomeKind.WARNING:
                workflow.warning(result.outcome.message)
            case OutcomeKind.FATAL:
                workflow.error(result.outcome.message)
            case _:
                pass

    return 1 if result.outcome.fatal else 0


def scan() -> None:
    """Entry point for ``icr-scan``."""
    sys.exit(main())

"""Entry point for running the TUI as a module.

Usage:
    python -m meadtracker.tui                          # Use .mead-tracker.yaml in cwd
    python -m meadtracker.tui --config settings.yaml   # Use a specific settings file
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from meadtracker.lib.errors import ConfigurationError, StoreError
from meadtracker.lib.logging import setup_logging
from meadtracker.lib.store import open_store
from meadtracker.tui.app import MeadTrackerApp
from meadtracker.tui.settings import get_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mead-tracker",
        description="Track mead batches, ingredients and brewing notes.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: .mead-tracker.yaml in the current directory)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the TUI application."""
    args = build_parser().parse_args(argv)

    settings = get_settings(reload=True, config_path=args.config)
    try:
        settings.validate()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        if e.suggestion:
            print(f"  {e.suggestion}", file=sys.stderr)
        return 1

    log_file = settings.get_log_file()
    setup_logging(
        verbose=settings.verbose,
        json_format=settings.json_logs,
        log_file=str(log_file) if log_file else None,
    )
    for warning in settings.load_warnings:
        logger.warning(warning)

    try:
        store = open_store(settings.get_db_path())
    except StoreError as e:
        logger.error("Startup failed", extra={"error": e.to_dict()})
        print(f"Could not open the mead database: {e}", file=sys.stderr)
        return 1

    try:
        MeadTrackerApp(store).run()
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

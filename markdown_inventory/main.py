#!/usr/bin/env python3
"""
Markdown File Inventory - command line entry point.

    markdown-file-inventory [--watch] <root_folder>

Reads ``<root_folder>/.markdown-file-inventory.yaml``, runs every task once
and, with ``--watch``, keeps re-running them whenever a task folder changes.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from markdown_inventory.domains.change_watch.watchers.filesystem import ChangeWatcher
from markdown_inventory.domains.tasks.orchestrator import run_all
from markdown_inventory.utils.config import get_settings, load_inventory_config
from markdown_inventory.utils.errors import ConfigError, WatcherError
from markdown_inventory.utils.log_config import configure_logging

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(
        prog="markdown-file-inventory",
        description="Generate markdown index files for the documents under a project folder.",
        epilog="Example: markdown-file-inventory ./project",
    )
    parser.add_argument(
        "root_folder",
        type=Path,
        help="Project folder containing .markdown-file-inventory.yaml.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Enable watch mode to automatically re-run tasks on file changes.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override the log level (default: from settings, INFO).",
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI."""

    args = parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    root_folder = args.root_folder

    try:
        config = load_inventory_config(root_folder, settings)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    run_all(root_folder, config, settings)

    if args.watch:
        try:
            ChangeWatcher(root_folder, config, settings).run()
        except WatcherError as e:
            logger.error(str(e))
            return 1

    return 0


def run():
    """Console script bridge."""
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    run()

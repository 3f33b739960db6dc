#!/usr/bin/env python3
"""
Common utilities shared across classpath-scout entry points.
"""

import argparse
import logging
import sys
from pathlib import Path

from src.constants import DEFAULT_LOG_FILE, LOG_FORMAT


def setup_logging(log_level: str | int = "INFO", log_file: str | None = None) -> None:
    """Setup logging configuration consistently across scripts.

    Args:
        log_level: Logging level as string ("INFO", "DEBUG") or integer constant
        log_file: Optional path to log file for file output; defaults to
            ``logs/classpath-scout.log`` under the working directory
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is None:
        logs_dir = Path("logs")
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            # Console-only when the directory can't be created
            pass
        else:
            log_file = str(logs_dir / DEFAULT_LOG_FILE)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass
        else:
            handlers.append(logging.FileHandler(log_file))

    # Handle both string levels ("INFO") and integer levels (logging.INFO)
    if isinstance(log_level, int):
        level = log_level
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add logging arguments shared by every command."""
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    parser.add_argument("--log-file", help="Optional log file")

"""Logging setup for md-task with package filtering."""

from __future__ import annotations

import logging
from typing import List

from rich.console import Console
from rich.logging import RichHandler

LOG_PACKAGES = ["md_task"]


class PackageFilter(logging.Filter):
    """Filter to only allow logs from specified packages."""

    def __init__(self, packages: List[str]) -> None:
        super().__init__()
        self.packages = packages

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log records to only allow specified packages.

        Args:
            record: LogRecord to filter

        Returns:
            True if record should be logged, False otherwise
        """
        return any(record.name.startswith(pkg) for pkg in self.packages)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the md-task CLI.

    Diagnostics go to stderr through a RichHandler so that command output on
    stdout stays clean. Without ``verbose`` only warnings are shown.

    Args:
        verbose: Enable debug level logging
    """
    log_level = logging.DEBUG if verbose else logging.WARNING
    log_format = "%(name)s: %(message)s"
    date_format = "%H:%M:%S"

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.addFilter(PackageFilter(LOG_PACKAGES))

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        handlers=[handler],
        force=True,
    )

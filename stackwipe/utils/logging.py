"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def setup_logging(level: str = "WARNING", verbose: bool = False) -> None:
    """Configure root logging with a rich handler on stderr.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        verbose: Keep AWS SDK loggers at the same level instead of silencing them
    """
    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(numeric_level)

    sdk_level = numeric_level if verbose else max(numeric_level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)

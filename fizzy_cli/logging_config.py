"""Logging setup for the fizzy command.

Records are rendered by rich on stderr so they never mix with command
output (tables, JSON) on stdout.
"""

import logging
import os

from rich.logging import RichHandler

from .output import err_console

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LEVEL = logging.WARNING


def get_log_level() -> int:
    """Level named by LOG_LEVEL, or WARNING when unset or unknown."""
    level_name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if not level_name:
        return DEFAULT_LEVEL
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else DEFAULT_LEVEL


def configure_logging(verbose: bool = False) -> None:
    """
    Configure logging for one CLI invocation.

    Args:
        verbose: Force DEBUG regardless of LOG_LEVEL
    """
    level = logging.DEBUG if verbose else get_log_level()

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=verbose, show_path=False)],
        force=True,
    )
    logging.getLogger("fizzy_cli").setLevel(level)

    # httpx logs each request at INFO; the client logs its own at DEBUG
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

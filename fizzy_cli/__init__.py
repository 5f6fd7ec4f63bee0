"""
Fizzy CLI - Python client and command-line tool for the Fizzy API.
"""

__version__ = "1.0.0"

from .client import (  # noqa: E402
    BASE_URL,
    CardStatus,
    ConfigurationError,
    FizzyClient,
    FizzyError,
    NotFoundError,
    RequestError,
    StatusChange,
    StepOutcome,
    ValidationError,
)
from .columns import ColumnMatch, MatchKind, resolve_column  # noqa: E402
from .config import ConfigStore, Settings, resolve_settings  # noqa: E402
from .logging_config import configure_logging  # noqa: E402
from .payloads import BoardData, CardData, CardFilters  # noqa: E402

__all__ = [
    "BASE_URL",
    "FizzyClient",
    "FizzyError",
    "ConfigurationError",
    "RequestError",
    "ValidationError",
    "NotFoundError",
    "CardStatus",
    "StatusChange",
    "StepOutcome",
    "ColumnMatch",
    "MatchKind",
    "resolve_column",
    "ConfigStore",
    "Settings",
    "resolve_settings",
    "BoardData",
    "CardData",
    "CardFilters",
    "configure_logging",
]

"""Persisted CLI configuration and credential resolution.

The config file is a small JSON document:

    {
        "token": "...",
        "account_slug": "..."
    }

Effective settings are resolved per value, in priority order: explicit
argument, then environment variable, then the config file.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_ENV = "FIZZY_API_TOKEN"
ACCOUNT_ENV = "FIZZY_ACCOUNT_SLUG"
CONFIG_DIR_ENV = "FIZZY_CONFIG_DIR"

SOURCE_ARGUMENT = "argument"
SOURCE_ENVIRONMENT = "environment"
SOURCE_CONFIG_FILE = "config file"


def default_config_path() -> Path:
    """Location of the config file, honouring FIZZY_CONFIG_DIR and XDG_CONFIG_HOME."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override) / "config.json"
    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "fizzy-cli" / "config.json"


class ConfigStore:
    """Reads and writes the CLI config file."""

    KEYS = ("token", "account_slug")

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else default_config_path()

    def load(self) -> dict[str, str]:
        """Return the stored values; missing or unreadable files yield empty values."""
        values = dict.fromkeys(self.KEYS, "")
        if not self.path.exists():
            return values
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to read config file {self.path}: {e}")
            return values
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed config file {self.path}")
            return values
        for key in self.KEYS:
            value = data.get(key)
            if isinstance(value, str):
                values[key] = value
        return values

    def _atomic_write(self, data: dict) -> None:
        """Atomically write data to the config file using temp file + rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_suffix(".tmp")
        temp_file.write_text(json.dumps(data, indent=2))
        temp_file.replace(self.path)

    def _set(self, key: str, value: str) -> None:
        data = self.load()
        data[key] = value
        self._atomic_write(data)
        logger.debug(f"Updated {key} in {self.path}")

    def set_token(self, token: str) -> None:
        self._set("token", token)

    def set_account_slug(self, account_slug: str) -> None:
        self._set("account_slug", account_slug)

    def clear(self) -> None:
        """Remove all stored values."""
        if self.path.exists():
            self.path.unlink()
            logger.debug(f"Removed {self.path}")


@dataclass(frozen=True)
class Settings:
    """Credentials resolved once per invocation."""

    token: str = ""
    account_slug: str = ""
    token_source: str | None = None
    account_source: str | None = None


def _pick(explicit: str | None, env_name: str, stored: str) -> tuple[str, str | None]:
    if explicit:
        return explicit, SOURCE_ARGUMENT
    env_value = os.getenv(env_name)
    if env_value:
        return env_value, SOURCE_ENVIRONMENT
    if stored:
        return stored, SOURCE_CONFIG_FILE
    return "", None


def resolve_settings(
    token: str | None = None,
    account_slug: str | None = None,
    store: ConfigStore | None = None,
) -> Settings:
    """
    Resolve token and account slug independently.

    Args:
        token: Explicit token, highest priority
        account_slug: Explicit account slug, highest priority
        store: Config store to fall back to (default location if omitted)

    Returns:
        Settings with empty strings for values that could not be resolved
    """
    stored = (store or ConfigStore()).load()
    resolved_token, token_source = _pick(token, TOKEN_ENV, stored["token"])
    resolved_account, account_source = _pick(account_slug, ACCOUNT_ENV, stored["account_slug"])
    return Settings(
        token=resolved_token,
        account_slug=resolved_account,
        token_source=token_source,
        account_source=account_source,
    )


def mask_token(token: str) -> str:
    """Show only the last 4 characters of a token."""
    if not token:
        return ""
    return "***" + token[-4:]

"""Terminal output helpers built on rich."""

import json
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from rich import box
from rich.console import Console
from rich.status import Status
from rich.table import Table
from rich.text import Text

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _line(symbol: str, style: str, message: str) -> Text:
    return Text.assemble((symbol, style), " ", str(message))


def success(message: str) -> None:
    console.print(_line("✓", "green", message))


def error(message: str) -> None:
    err_console.print(_line("✗", "red", message))


def info(message: str) -> None:
    console.print(_line("ℹ", "blue", message))


def warn(message: str) -> None:
    console.print(_line("⚠", "yellow", message))


def print_json(data: Any) -> None:
    """Print raw JSON, unstyled, so it can be piped."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def print_table(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
    table = Table(show_header=True, header_style="bold", box=box.SQUARE)
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*(Text("-" if cell is None else str(cell)) for cell in row))
    console.print(table)


def spinner(message: str) -> Status:
    """Spinner shown on stderr while a request runs."""
    return err_console.status(message)


def format_date(value: str | None) -> str:
    """Format an ISO 8601 timestamp in local time, or "-" when empty."""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M")


def truncate(text: str | None, length: int = 50) -> str:
    """Cut text to at most `length` characters, ending with "..." when cut."""
    if not text:
        return "-"
    if len(text) <= length:
        return text
    return text[: length - 3] + "..."

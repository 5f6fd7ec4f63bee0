"""Column lookup for moving cards by column ID or name."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MatchKind(Enum):
    ID = "id"
    NAME = "name"
    NONE = "none"


@dataclass(frozen=True)
class ColumnMatch:
    """Result of resolving a column reference against a board's columns."""

    kind: MatchKind
    column: dict[str, Any] | None = None

    @property
    def found(self) -> bool:
        return self.kind is not MatchKind.NONE

    @property
    def column_id(self) -> str | None:
        if self.column is None:
            return None
        return str(self.column.get("id"))


def resolve_column(columns: Iterable[dict[str, Any]], target: str) -> ColumnMatch:
    """
    Find a column by exact ID, falling back to a case-insensitive name match.

    An ID match always wins over a name match, even when another column's
    name also matches. Among name matches the first column in board order wins.

    Args:
        columns: Column objects as returned by the API
        target: Column ID or name

    Returns:
        ColumnMatch with kind ID, NAME, or NONE
    """
    columns = list(columns)
    target = str(target)

    for column in columns:
        if str(column.get("id")) == target:
            return ColumnMatch(MatchKind.ID, column)

    wanted = target.casefold()
    for column in columns:
        name = column.get("name")
        if name is not None and str(name).casefold() == wanted:
            return ColumnMatch(MatchKind.NAME, column)

    return ColumnMatch(MatchKind.NONE)


def column_names(columns: Iterable[dict[str, Any]]) -> list[str]:
    """Names of the given columns, skipping unnamed ones."""
    return [str(c["name"]) for c in columns if c.get("name")]

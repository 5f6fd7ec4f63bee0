"""Request body and query types for the Fizzy API.

Each payload type knows its own envelope: card bodies are wrapped under a
``card`` key, board bodies are sent as-is.
"""

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any, ClassVar
from urllib.parse import urlencode


def dump_body(data: Any) -> str:
    """Serialize a request body as compact JSON."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


@dataclass
class _Payload:
    envelope: ClassVar[str | None] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the set fields only."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def wrap(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        if cls.envelope is None:
            return dict(data)
        return {cls.envelope: dict(data)}

    def body(self) -> dict[str, Any]:
        return self.wrap(self.to_dict())

    @classmethod
    def coerce(cls, data: "_Payload | Mapping[str, Any]") -> dict[str, Any]:
        """Build the wire body from either a payload instance or a plain mapping.

        Mappings are passed through untouched apart from the envelope, so callers
        may send fields this type does not declare.
        """
        if isinstance(data, cls):
            return data.body()
        if isinstance(data, Mapping):
            return cls.wrap(data)
        raise TypeError(f"Expected {cls.__name__} or a mapping, got {type(data).__name__}")


@dataclass
class BoardData(_Payload):
    """Board create/update body."""

    name: str | None = None
    description: str | None = None


@dataclass
class CardData(_Payload):
    """Card create/update body, sent as ``{"card": {...}}``."""

    envelope: ClassVar[str | None] = "card"

    title: str | None = None
    description: str | None = None
    column_id: str | None = None
    status: str | None = None
    tag_ids: list[str] | None = None


@dataclass
class CardFilters:
    """Allow-listed filters for the card listing.

    Field order is the order parameters appear in the query string.
    """

    board_id: str | None = None
    column_id: str | None = None
    assignee_id: str | None = None
    tag_id: str | None = None
    status: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "CardFilters":
        data = data or {}
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})

    def to_query(self) -> str:
        """Return ``?key=value&...`` for the set filters, or an empty string."""
        params = [(f.name, str(getattr(self, f.name))) for f in fields(self) if getattr(self, f.name)]
        if not params:
            return ""
        return "?" + urlencode(params)

"""
Fizzy API Client implementation.
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from .columns import column_names, resolve_column
from .config import ConfigStore, resolve_settings
from .payloads import BoardData, CardData, CardFilters, dump_body

logger = logging.getLogger(__name__)

BASE_URL = "https://app.fizzy.do"


class FizzyError(Exception):
    """Base class for all errors raised by the Fizzy client."""


class ConfigurationError(FizzyError):
    """Raised when a token or account slug is missing, before any request is made."""


class RequestError(FizzyError):
    """Exception raised for failed Fizzy API requests."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def from_response(cls, status_code: int, body: str) -> "RequestError":
        return cls(f"API Error {status_code}: {body}", status_code=status_code, body=body)


class ValidationError(FizzyError):
    """Raised for invalid input to a client operation."""


class NotFoundError(FizzyError):
    """Raised when a referenced board or column cannot be resolved."""


class CardStatus(str, Enum):
    PUBLISHED = "published"
    CLOSED = "closed"
    NOT_NOW = "not_now"

    @classmethod
    def parse(cls, value: "str | CardStatus") -> "CardStatus":
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValidationError(f"Invalid status '{value}'. Valid options: {valid}") from None


@dataclass
class StepOutcome:
    """Outcome of one best-effort step of a composite operation."""

    name: str
    ok: bool
    error: RequestError | None = None


@dataclass
class StatusChange:
    """Result of set_card_status()."""

    card_number: str
    status: CardStatus
    steps: list[StepOutcome] = field(default_factory=list)


class FizzyClient:
    """
    Python client for the Fizzy API.

    Token and account slug are resolved once at construction from, in order,
    the explicit arguments, FIZZY_API_TOKEN / FIZZY_ACCOUNT_SLUG, and the
    config file. Missing values are only reported when a call needs them.

    Example:
        >>> with FizzyClient(token="abc123", account_slug="acme") as client:
        ...     for board in client.list_boards():
        ...         print(board["name"])
    """

    def __init__(
        self,
        token: str | None = None,
        account_slug: str | None = None,
        *,
        base_url: str = BASE_URL,
        store: ConfigStore | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the Fizzy API client.

        Args:
            token: API token (overrides environment and config file)
            account_slug: Account slug (overrides environment and config file)
            base_url: The API origin (default: https://app.fizzy.do)
            store: Config store used as the last resolution source
            transport: Optional httpx transport, mainly for tests
        """
        self.settings = resolve_settings(token=token, account_slug=account_slug, store=store)
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, transport=transport, follow_redirects=True)

    @property
    def token(self) -> str:
        return self.settings.token

    @property
    def account_slug(self) -> str:
        return self.settings.account_slug

    def __enter__(self) -> "FizzyClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    # =========================================================================
    # Request primitive and guards
    # =========================================================================

    def require_token(self) -> str:
        if not self.settings.token:
            raise ConfigurationError("No API token configured. Run: fizzy config set-token <token>")
        return self.settings.token

    def require_account(self) -> str:
        if not self.settings.account_slug:
            raise ConfigurationError("No account configured. Run: fizzy config set-account <account-slug>")
        return self.settings.account_slug

    def _account_path(self, path: str) -> str:
        return f"/{self.require_account()}{path}"

    def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Make an authenticated API request.

        Args:
            path: Path relative to the API origin (e.g., "/my/identity")
            method: HTTP method (default: GET)
            body: Pre-serialized JSON body
            headers: Header overrides, applied on top of the defaults

        Returns:
            The decoded JSON response, or None for 204 and empty responses

        Raises:
            ConfigurationError: If no token is configured (no request is made)
            RequestError: On a non-2xx status, a transport failure, or an invalid JSON body
        """
        token = self.require_token()
        request_headers = httpx.Headers(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        if headers:
            request_headers.update(headers)

        logger.debug(f"{method} {path}")
        try:
            response = self._client.request(
                method,
                path,
                content=body.encode("utf-8") if body is not None else None,
                headers=request_headers,
            )
        except httpx.HTTPError as e:
            raise RequestError(f"Request failed: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")

        if not response.is_success:
            raise RequestError.from_response(response.status_code, response.text)

        if response.status_code == 204:
            return None

        text = response.text
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise RequestError(
                f"Invalid JSON response from {path}",
                status_code=response.status_code,
                body=text,
            ) from e

    def _send(self, method: str, path: str, payload: Any = None) -> Any:
        body = dump_body(payload) if payload is not None else None
        return self.request(path, method=method, body=body)

    # =========================================================================
    # Identity & Notifications
    # =========================================================================

    def get_identity(self) -> dict[str, Any]:
        """
        Get the authenticated user's identity and accessible accounts.

        Not account-scoped.

        Example:
            >>> identity = client.get_identity()
            >>> [account["slug"] for account in identity["accounts"]]
        """
        return self.request("/my/identity")

    def list_notifications(self) -> list[dict[str, Any]]:
        """List the authenticated user's notifications. Not account-scoped."""
        return self.request("/my/notifications")

    # =========================================================================
    # Board Methods
    # =========================================================================

    def list_boards(self) -> list[dict[str, Any]]:
        """List all boards in the account."""
        return self.request(self._account_path("/boards"))

    def get_board(self, board_id: str) -> dict[str, Any]:
        """
        Get board details.

        Args:
            board_id: The board ID

        Returns:
            Board object, including its columns
        """
        return self.request(self._account_path(f"/boards/{board_id}"))

    def create_board(self, data: BoardData | Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a board.

        Args:
            data: BoardData or a plain mapping, sent without an envelope

        Example:
            >>> board = client.create_board(BoardData(name="Roadmap"))
        """
        return self._send("POST", self._account_path("/boards"), BoardData.coerce(data))

    def update_board(self, board_id: str, data: BoardData | Mapping[str, Any]) -> dict[str, Any]:
        """Update a board. The body is sent without an envelope."""
        return self._send("PUT", self._account_path(f"/boards/{board_id}"), BoardData.coerce(data))

    def delete_board(self, board_id: str) -> None:
        """Delete a board."""
        self.request(self._account_path(f"/boards/{board_id}"), method="DELETE")

    def list_columns(self, board_id: str) -> list[dict[str, Any]]:
        """List the columns of a board."""
        return self.request(self._account_path(f"/boards/{board_id}/columns"))

    # =========================================================================
    # Card Methods
    # =========================================================================

    def list_cards(self, filters: CardFilters | Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        List cards, optionally filtered.

        Args:
            filters: CardFilters or a mapping with any of board_id, column_id,
                assignee_id, tag_id, status. Unset filters are omitted.

        Example:
            >>> cards = client.list_cards({"board_id": "123", "status": "open"})
        """
        if not isinstance(filters, CardFilters):
            filters = CardFilters.from_mapping(filters)
        path = self._account_path("/cards")
        return self.request(path + filters.to_query())

    def get_card(self, card_number: str | int) -> dict[str, Any]:
        """
        Get card details.

        Args:
            card_number: The card number within the account

        Returns:
            Card object with title, board, column, tags, assignees, etc.
        """
        return self.request(self._account_path(f"/cards/{card_number}"))

    def create_card(self, board_id: str, data: CardData | Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a card on a board.

        Args:
            board_id: The board ID
            data: CardData or a plain mapping, sent as {"card": data}

        Example:
            >>> card = client.create_card("123", CardData(title="New Card"))
        """
        return self._send("POST", self._account_path(f"/boards/{board_id}/cards"), CardData.coerce(data))

    def update_card(self, card_number: str | int, data: CardData | Mapping[str, Any]) -> dict[str, Any]:
        """Update card fields. The body is sent as {"card": data}."""
        return self._send("PUT", self._account_path(f"/cards/{card_number}"), CardData.coerce(data))

    def delete_card(self, card_number: str | int) -> None:
        """Delete a card."""
        self.request(self._account_path(f"/cards/{card_number}"), method="DELETE")

    def close_card(self, card_number: str | int) -> Any:
        """Close a card by creating its closure."""
        return self.request(self._account_path(f"/cards/{card_number}/closure"), method="POST")

    def reopen_card(self, card_number: str | int) -> Any:
        """Reopen a closed card by deleting its closure."""
        return self.request(self._account_path(f"/cards/{card_number}/closure"), method="DELETE")

    def set_card_not_now(self, card_number: str | int) -> Any:
        """Move a card to "Not Now"."""
        return self.request(self._account_path(f"/cards/{card_number}/not_now"), method="POST")

    def unset_card_not_now(self, card_number: str | int) -> Any:
        """Take a card out of "Not Now"."""
        return self.request(self._account_path(f"/cards/{card_number}/not_now"), method="DELETE")

    def triage_card(self, card_number: str | int, column_id: str) -> Any:
        """
        Move a card into a column.

        Args:
            card_number: The card number
            column_id: The target column ID
        """
        return self._send("POST", self._account_path(f"/cards/{card_number}/triage"), {"column_id": column_id})

    def toggle_tag(self, card_number: str | int, tag_title: str) -> Any:
        """
        Toggle a tag on a card.

        Adds the tag when the card doesn't have it and removes it when it does.
        The server keeps the state; calling this twice is a no-op overall.

        Args:
            card_number: The card number
            tag_title: Tag title, created on the fly if it doesn't exist
        """
        return self._send("POST", self._account_path(f"/cards/{card_number}/taggings"), {"tag_title": tag_title})

    # =========================================================================
    # Comment Methods
    # =========================================================================

    def list_comments(self, card_number: str | int) -> list[dict[str, Any]]:
        """List comments on a card."""
        return self.request(self._account_path(f"/cards/{card_number}/comments"))

    def create_comment(self, card_number: str | int, content: str) -> dict[str, Any]:
        """
        Add a comment to a card.

        Args:
            card_number: The card number
            content: Comment text

        Returns:
            Created comment object
        """
        return self._send("POST", self._account_path(f"/cards/{card_number}/comments"), {"content": content})

    def delete_comment(self, card_number: str | int, comment_id: str) -> None:
        """Delete a comment from a card."""
        self.request(self._account_path(f"/cards/{card_number}/comments/{comment_id}"), method="DELETE")

    # =========================================================================
    # Tags & Users
    # =========================================================================

    def list_tags(self) -> list[dict[str, Any]]:
        """List all tags in the account."""
        return self.request(self._account_path("/tags"))

    def list_users(self) -> list[dict[str, Any]]:
        """List all users in the account."""
        return self.request(self._account_path("/users"))

    # =========================================================================
    # Composite operations
    # =========================================================================

    def _best_effort(self, name: str, step: Callable[[str | int], Any], card_number: str | int) -> StepOutcome:
        """Run a step whose RequestError is recorded instead of raised."""
        try:
            step(card_number)
        except RequestError as e:
            logger.debug(f"Ignoring failed {name} for card {card_number}: {e}")
            return StepOutcome(name=name, ok=False, error=e)
        return StepOutcome(name=name, ok=True)

    def set_card_status(self, card_number: str | int, status: str | CardStatus) -> StatusChange:
        """
        Set a card's status to published, closed, or not_now.

        "closed" and "not_now" create the matching lifecycle sub-resource.
        "published" deletes both the closure and the not_now marker, since
        the card may be in either state. Each of those two deletions is
        best-effort: a RequestError is recorded in the returned steps and
        does not stop the other one.

        Raises:
            ValidationError: For an unknown status, before any request
        """
        status = CardStatus.parse(status)
        change = StatusChange(card_number=str(card_number), status=status)

        if status is CardStatus.CLOSED:
            self.close_card(card_number)
            change.steps.append(StepOutcome(name="close", ok=True))
        elif status is CardStatus.NOT_NOW:
            self.set_card_not_now(card_number)
            change.steps.append(StepOutcome(name="not_now", ok=True))
        else:
            change.steps.append(self._best_effort("reopen", self.reopen_card, card_number))
            change.steps.append(self._best_effort("unset_not_now", self.unset_card_not_now, card_number))
        return change

    def move_card(self, card_number: str | int, column: str) -> Any:
        """
        Move a card to a column given by ID or name.

        Looks up the card's board, lists the board's columns, resolves the
        target (exact ID first, then case-insensitive name) and triages the
        card into it.

        Raises:
            NotFoundError: If the card has no board or the column can't be resolved
        """
        card = self.get_card(card_number) or {}
        board = card.get("board") or {}
        board_id = board.get("id") if isinstance(board, dict) else None
        board_id = board_id or card.get("board_id")
        if not board_id:
            raise NotFoundError(f"Card #{card_number} has no board")

        columns = self.list_columns(board_id) or []
        match = resolve_column(columns, column)
        if not match.found:
            names = column_names(columns)
            if names:
                raise NotFoundError(f"Column '{column}' not found. Available columns: {', '.join(names)}")
            raise NotFoundError(f"Column '{column}' not found. Board {board_id} has no columns")

        logger.debug(f"Resolved column '{column}' by {match.kind.value} to {match.column_id}")
        return self.triage_card(card_number, match.column_id)

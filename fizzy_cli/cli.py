"""Command-line interface for Fizzy.

Usage:
    fizzy config set-token <token>
    fizzy config set-account <slug>
    fizzy boards list
    fizzy cards list --board <id> --status open
    fizzy cards move 42 "In Progress"
"""

import argparse
import logging
import sys
from typing import Any

from . import __version__, output
from .client import CardStatus, FizzyClient, FizzyError
from .config import ConfigStore, mask_token, resolve_settings
from .logging_config import configure_logging
from .output import format_date, print_json, print_table, spinner, success, truncate
from .payloads import BoardData, CardData, CardFilters

logger = logging.getLogger(__name__)


def _named(entity: dict[str, Any] | None, *keys: str) -> str:
    """First non-empty value of `keys` on a nested object, or "-"."""
    for key in keys:
        if entity and entity.get(key):
            return str(entity[key])
    return "-"


# ============================================================================
# config
# ============================================================================


def cmd_config_set_token(args: argparse.Namespace, store: ConfigStore) -> int:
    store.set_token(args.token)
    success("API token saved successfully")
    return 0


def cmd_config_set_account(args: argparse.Namespace, store: ConfigStore) -> int:
    store.set_account_slug(args.slug)
    success(f"Default account set to: {args.slug}")
    return 0


def cmd_config_show(args: argparse.Namespace, store: ConfigStore) -> int:
    settings = resolve_settings(store=store)
    output.info(f"Config file: {store.path}")
    print_table(
        ["Setting", "Value", "Source"],
        [
            ["Token", mask_token(settings.token) or "(not set)", settings.token_source or "-"],
            ["Account Slug", settings.account_slug or "(not set)", settings.account_source or "-"],
        ],
    )
    return 0


def cmd_config_clear(args: argparse.Namespace, store: ConfigStore) -> int:
    store.clear()
    success("Configuration cleared")
    return 0


def cmd_config_path(args: argparse.Namespace, store: ConfigStore) -> int:
    print(store.path)
    return 0


# ============================================================================
# identity & notifications
# ============================================================================


def cmd_identity(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching identity..."):
        identity = client.get_identity() or {}

    if args.json:
        print_json(identity)
        return 0

    accounts = identity.get("accounts") or []
    # The user record is nested inside each account
    user = accounts[0].get("user") if accounts else None
    if user:
        success(f"Logged in as: {user.get('name')} ({user.get('email_address')})")

    if accounts:
        print("\nAccessible accounts:")
        print_table(
            ["Slug", "Name", "Role"],
            [[acc.get("slug"), acc.get("name"), _named(acc.get("user"), "role")] for acc in accounts],
        )
    return 0


def cmd_notifications(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching notifications..."):
        notifications = client.list_notifications()

    if args.json:
        print_json(notifications)
        return 0

    if not notifications:
        print("No notifications found.")
        return 0

    print_table(
        ["ID", "Title", "Card", "Read", "Created"],
        [
            [
                n.get("id"),
                truncate(n.get("title"), 40),
                _named(n.get("card"), "number", "title"),
                "yes" if n.get("read_at") or n.get("read") else "no",
                format_date(n.get("created_at")),
            ]
            for n in notifications
        ],
    )
    return 0


# ============================================================================
# boards
# ============================================================================


def _print_columns(columns: list[dict[str, Any]]) -> None:
    print_table(["ID", "Name", "Position"], [[c.get("id"), c.get("name"), c.get("position")] for c in columns])


def cmd_boards_list(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching boards..."):
        boards = client.list_boards()

    if args.json:
        print_json(boards)
        return 0

    if not boards:
        print("No boards found.")
        return 0

    print_table(
        ["ID", "Name", "Description", "Cards"],
        [[b.get("id"), b.get("name"), truncate(b.get("description"), 40), b.get("cards_count") or "-"] for b in boards],
    )
    return 0


def cmd_boards_show(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching board..."):
        board = client.get_board(args.id)

    if args.json:
        print_json(board)
        return 0

    board = board or {}
    print(f"\nBoard: {_named(board, 'name')}")
    print(f"ID: {board.get('id') or args.id}")
    if board.get("description"):
        print(f"Description: {board['description']}")

    columns = board.get("columns") or []
    if columns:
        print("\nColumns:")
        _print_columns(columns)
    return 0


def cmd_boards_columns(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching columns..."):
        columns = client.list_columns(args.id)

    if args.json:
        print_json(columns)
        return 0

    if not columns:
        print("No columns found.")
        return 0

    _print_columns(columns)
    return 0


def cmd_boards_create(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Creating board..."):
        board = client.create_board(BoardData(name=args.name, description=args.description))

    if args.json:
        print_json(board)
        return 0

    success(f"Board created: {board.get('name')} (ID: {board.get('id')})" if board else "Board created")
    return 0


def cmd_boards_update(args: argparse.Namespace, client: FizzyClient) -> int:
    data = BoardData(name=args.name or None, description=args.description or None)
    if not data.to_dict():
        output.error("No update options provided. Use --name or --description")
        return 1

    with spinner("Updating board..."):
        board = client.update_board(args.id, data)

    if args.json:
        print_json(board)
        return 0

    success(f"Board updated: {_named(board, 'name', 'id')}")
    return 0


def cmd_boards_delete(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Deleting board..."):
        client.delete_board(args.id)
    success("Board deleted")
    return 0


# ============================================================================
# cards
# ============================================================================


def _card_status(card: dict[str, Any]) -> str:
    if card.get("closed_at") or card.get("closed"):
        return "closed"
    if card.get("status"):
        return str(card["status"])
    return "open"


def cmd_cards_list(args: argparse.Namespace, client: FizzyClient) -> int:
    filters = CardFilters(
        board_id=args.board,
        column_id=args.column,
        assignee_id=args.assignee,
        tag_id=args.tag,
        status=args.status,
    )
    with spinner("Fetching cards..."):
        cards = client.list_cards(filters)

    if args.json:
        print_json(cards)
        return 0

    if not cards:
        print("No cards found.")
        return 0

    print_table(
        ["#", "Title", "Status", "Column", "Updated"],
        [
            [
                c.get("number"),
                truncate(c.get("title"), 40),
                _card_status(c),
                _named(c.get("column"), "name"),
                format_date(c.get("updated_at")),
            ]
            for c in cards
        ],
    )
    return 0


def cmd_cards_show(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching card..."):
        card = client.get_card(args.number)

    if args.json:
        print_json(card)
        return 0

    card = card or {}
    print(f"\n#{card.get('number') or args.number}: {_named(card, 'title')}")
    print(f"Status: {_card_status(card).replace('_', ' ').capitalize()}")
    print(f"Board: {_named(card.get('board'), 'name')}")
    print(f"Column: {_named(card.get('column'), 'name')}")
    print(f"Created: {format_date(card.get('created_at'))}")
    print(f"Updated: {format_date(card.get('updated_at'))}")

    assignees = card.get("assignees") or []
    if assignees:
        print(f"Assignees: {', '.join(_named(a, 'name', 'email_address', 'email') for a in assignees)}")

    tags = card.get("tags") or []
    if tags:
        print(f"Tags: {', '.join(_named(t, 'title', 'name') for t in tags)}")

    description = card.get("description") or card.get("content")
    if description:
        print(f"\nDescription:\n{description}")
    return 0


def cmd_cards_create(args: argparse.Namespace, client: FizzyClient) -> int:
    data = CardData(title=args.title, description=args.description, column_id=args.column)
    with spinner("Creating card..."):
        card = client.create_card(args.board_id, data)

    if args.json:
        print_json(card)
        return 0

    success(f"Card created: #{card.get('number')} - {card.get('title')}" if card else "Card created")
    return 0


def cmd_cards_update(args: argparse.Namespace, client: FizzyClient) -> int:
    data = CardData(title=args.title or None, description=args.description or None, column_id=args.column or None)
    if not data.to_dict():
        output.error("No update options provided. Use --title, --description, or --column")
        return 1

    with spinner("Updating card..."):
        card = client.update_card(args.number, data)

    if args.json:
        print_json(card)
        return 0

    success(f"Card updated: #{_named(card, 'number') if card else args.number}")
    return 0


def cmd_cards_close(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Closing card..."):
        client.close_card(args.number)
    success(f"Card #{args.number} closed")
    return 0


def cmd_cards_reopen(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Reopening card..."):
        client.reopen_card(args.number)
    success(f"Card #{args.number} reopened")
    return 0


def cmd_cards_not_now(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Updating card..."):
        if args.undo:
            client.unset_card_not_now(args.number)
        else:
            client.set_card_not_now(args.number)
    success(f"Card #{args.number} {'taken out of' if args.undo else 'moved to'} Not Now")
    return 0


def cmd_cards_status(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Updating card status..."):
        change = client.set_card_status(args.number, args.status)
    success(f"Card #{args.number} is now {change.status.value}")
    return 0


def cmd_cards_move(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Moving card..."):
        card = client.move_card(args.number, args.column)

    if args.json:
        print_json(card)
        return 0

    success(f"Card #{args.number} moved to {args.column}")
    return 0


def cmd_cards_tag(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Toggling tag..."):
        client.toggle_tag(args.number, args.tag)
    success(f"Tag '{args.tag}' toggled on card #{args.number}")
    return 0


def cmd_cards_delete(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Deleting card..."):
        client.delete_card(args.number)
    success(f"Card #{args.number} deleted")
    return 0


def cmd_cards_comments(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching comments..."):
        comments = client.list_comments(args.number)

    if args.json:
        print_json(comments)
        return 0

    if not comments:
        print("No comments found.")
        return 0

    for i, comment in enumerate(comments, 1):
        print(f"\n--- Comment {i} (ID: {comment.get('id')}) ---")
        creator = comment.get("creator")
        print(f"By: {_named(creator, 'name', 'email_address', 'email') if creator else 'Unknown'}")
        print(f"Date: {format_date(comment.get('created_at'))}")
        body = comment.get("body")
        content = body.get("plain_text") if isinstance(body, dict) else comment.get("content")
        print(f"\n{content or ''}")
    return 0


def cmd_cards_comment(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Adding comment..."):
        comment = client.create_comment(args.number, args.content)

    if args.json:
        print_json(comment)
        return 0

    success(f"Comment added to card #{args.number}")
    return 0


def cmd_cards_delete_comment(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Deleting comment..."):
        client.delete_comment(args.number, args.comment_id)
    success(f"Comment {args.comment_id} deleted from card #{args.number}")
    return 0


# ============================================================================
# tags & users
# ============================================================================


def cmd_tags_list(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching tags..."):
        tags = client.list_tags()

    if args.json:
        print_json(tags)
        return 0

    if not tags:
        print("No tags found.")
        return 0

    print_table(["ID", "Title"], [[t.get("id"), _named(t, "title", "name")] for t in tags])
    return 0


def cmd_users_list(args: argparse.Namespace, client: FizzyClient) -> int:
    with spinner("Fetching users..."):
        users = client.list_users()

    if args.json:
        print_json(users)
        return 0

    if not users:
        print("No users found.")
        return 0

    print_table(
        ["ID", "Name", "Email", "Role"],
        [[u.get("id"), u.get("name"), _named(u, "email_address", "email"), _named(u, "role")] for u in users],
    )
    return 0


# ============================================================================
# Parser
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fizzy", description="CLI tool for interacting with the Fizzy API")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    json_opt = argparse.ArgumentParser(add_help=False)
    json_opt.add_argument("--json", action="store_true", help="Output as JSON")

    sub = parser.add_subparsers(dest="command", metavar="<command>")

    # config
    config = sub.add_parser("config", help="Manage CLI configuration")
    config_sub = config.add_subparsers(dest="config_command", metavar="<action>", required=True)
    p = config_sub.add_parser("set-token", help="Set your Fizzy API token")
    p.add_argument("token")
    p.set_defaults(func=cmd_config_set_token, needs_client=False)
    p = config_sub.add_parser("set-account", help="Set the default account slug")
    p.add_argument("slug")
    p.set_defaults(func=cmd_config_set_account, needs_client=False)
    p = config_sub.add_parser("show", help="Show current configuration")
    p.set_defaults(func=cmd_config_show, needs_client=False)
    p = config_sub.add_parser("clear", help="Clear all configuration")
    p.set_defaults(func=cmd_config_clear, needs_client=False)
    p = config_sub.add_parser("path", help="Show config file path")
    p.set_defaults(func=cmd_config_path, needs_client=False)

    # identity & notifications
    p = sub.add_parser(
        "identity", aliases=["me"], parents=[json_opt], help="Get your identity and accessible accounts"
    )
    p.set_defaults(func=cmd_identity, needs_client=True)
    p = sub.add_parser("notifications", parents=[json_opt], help="List your notifications")
    p.set_defaults(func=cmd_notifications, needs_client=True)

    # boards
    boards = sub.add_parser("boards", help="Manage boards")
    boards_sub = boards.add_subparsers(dest="boards_command", metavar="<action>", required=True)
    p = boards_sub.add_parser("list", aliases=["ls"], parents=[json_opt], help="List all boards")
    p.set_defaults(func=cmd_boards_list, needs_client=True)
    p = boards_sub.add_parser("show", parents=[json_opt], help="Show board details")
    p.add_argument("id")
    p.set_defaults(func=cmd_boards_show, needs_client=True)
    p = boards_sub.add_parser("columns", parents=[json_opt], help="List the columns of a board")
    p.add_argument("id")
    p.set_defaults(func=cmd_boards_columns, needs_client=True)
    p = boards_sub.add_parser("create", parents=[json_opt], help="Create a new board")
    p.add_argument("name")
    p.add_argument("-d", "--description", help="Board description")
    p.set_defaults(func=cmd_boards_create, needs_client=True)
    p = boards_sub.add_parser("update", parents=[json_opt], help="Update a board")
    p.add_argument("id")
    p.add_argument("-n", "--name", help="New name")
    p.add_argument("-d", "--description", help="New description")
    p.set_defaults(func=cmd_boards_update, needs_client=True)
    p = boards_sub.add_parser("delete", help="Delete a board")
    p.add_argument("id")
    p.set_defaults(func=cmd_boards_delete, needs_client=True)

    # cards
    cards = sub.add_parser("cards", help="Manage cards")
    cards_sub = cards.add_subparsers(dest="cards_command", metavar="<action>", required=True)
    p = cards_sub.add_parser("list", aliases=["ls"], parents=[json_opt], help="List cards")
    p.add_argument("-b", "--board", help="Filter by board ID")
    p.add_argument("-c", "--column", help="Filter by column ID")
    p.add_argument("-a", "--assignee", help="Filter by assignee ID")
    p.add_argument("-t", "--tag", help="Filter by tag ID")
    p.add_argument("-s", "--status", help="Filter by status (open, closed)")
    p.set_defaults(func=cmd_cards_list, needs_client=True)
    p = cards_sub.add_parser("show", parents=[json_opt], help="Show card details")
    p.add_argument("number")
    p.set_defaults(func=cmd_cards_show, needs_client=True)
    p = cards_sub.add_parser("create", parents=[json_opt], help="Create a new card")
    p.add_argument("board_id")
    p.add_argument("title")
    p.add_argument("-d", "--description", help="Card description")
    p.add_argument("-c", "--column", help="Column ID")
    p.set_defaults(func=cmd_cards_create, needs_client=True)
    p = cards_sub.add_parser("update", parents=[json_opt], help="Update a card")
    p.add_argument("number")
    p.add_argument("-t", "--title", help="New title")
    p.add_argument("-d", "--description", help="New description")
    p.add_argument("-c", "--column", help="Move to column ID")
    p.set_defaults(func=cmd_cards_update, needs_client=True)
    p = cards_sub.add_parser("close", help="Close a card")
    p.add_argument("number")
    p.set_defaults(func=cmd_cards_close, needs_client=True)
    p = cards_sub.add_parser("reopen", help="Reopen a closed card")
    p.add_argument("number")
    p.set_defaults(func=cmd_cards_reopen, needs_client=True)
    p = cards_sub.add_parser("not-now", help="Move a card to Not Now")
    p.add_argument("number")
    p.add_argument("--undo", action="store_true", help="Take the card out of Not Now")
    p.set_defaults(func=cmd_cards_not_now, needs_client=True)
    p = cards_sub.add_parser("status", help="Set card status")
    p.add_argument("number")
    p.add_argument("status", help=f"One of: {', '.join(s.value for s in CardStatus)}")
    p.set_defaults(func=cmd_cards_status, needs_client=True)
    p = cards_sub.add_parser("move", parents=[json_opt], help="Move a card to a column (ID or name)")
    p.add_argument("number")
    p.add_argument("column")
    p.set_defaults(func=cmd_cards_move, needs_client=True)
    p = cards_sub.add_parser("tag", help="Toggle a tag on a card")
    p.add_argument("number")
    p.add_argument("tag")
    p.set_defaults(func=cmd_cards_tag, needs_client=True)
    p = cards_sub.add_parser("delete", help="Delete a card")
    p.add_argument("number")
    p.set_defaults(func=cmd_cards_delete, needs_client=True)
    p = cards_sub.add_parser("comments", parents=[json_opt], help="List comments on a card")
    p.add_argument("number")
    p.set_defaults(func=cmd_cards_comments, needs_client=True)
    p = cards_sub.add_parser("comment", parents=[json_opt], help="Add a comment to a card")
    p.add_argument("number")
    p.add_argument("content")
    p.set_defaults(func=cmd_cards_comment, needs_client=True)
    p = cards_sub.add_parser("delete-comment", help="Delete a comment from a card")
    p.add_argument("number")
    p.add_argument("comment_id")
    p.set_defaults(func=cmd_cards_delete_comment, needs_client=True)

    # tags & users
    tags = sub.add_parser("tags", help="Manage tags")
    tags_sub = tags.add_subparsers(dest="tags_command", metavar="<action>", required=True)
    p = tags_sub.add_parser("list", aliases=["ls"], parents=[json_opt], help="List all tags")
    p.set_defaults(func=cmd_tags_list, needs_client=True)

    users = sub.add_parser("users", help="Manage users")
    users_sub = users.add_subparsers(dest="users_command", metavar="<action>", required=True)
    p = users_sub.add_parser("list", aliases=["ls"], parents=[json_opt], help="List all users")
    p.set_defaults(func=cmd_users_list, needs_client=True)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        if args.needs_client:
            with FizzyClient() as client:
                return args.func(args, client)
        return args.func(args, ConfigStore())
    except FizzyError as e:
        logger.debug(f"Command failed: {e!r}")
        output.error(str(e))
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

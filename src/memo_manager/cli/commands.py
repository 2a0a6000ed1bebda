# src/memo_manager/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..core.state import AppState
from ..errors import MemoManagerError
from ..memos.merge import merge_memos
from ..memos.models import Memo

# handler(state, args, raw): args are shell-style tokens, raw is the text after the command name.
CommandHandler = Callable[[AppState, list[str], str], str]

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 80


class CommandRegistry:
    """Slash-command registry used by front-ends (/load, /merge, /things, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Operation errors come back as their message, unchanged; nothing is retried.
        """
        if not line.startswith("/"):
            return None

        head, _, raw = line[1:].partition(" ")
        name = head.strip().lower()
        if not name:
            return "Empty command. Use /help to list available commands."

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            args = shlex.split(raw)
        except ValueError as e:
            return f"Can't parse arguments: {e}"

        try:
            return handler(state, args, raw.strip())
        except (MemoManagerError, FileNotFoundError) as e:
            logger.info("/%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _format_memo(i: int, memo: Memo) -> str:
    text = " ".join(memo.content.split())
    if len(text) > _PREVIEW_CHARS:
        text = text[: _PREVIEW_CHARS - 3] + "..."
    label = memo.label if memo.label is not None else "-"
    return f"{i}. {memo.name} [{label}] {text}"


def _split_first(raw: str) -> tuple[str, str]:
    """Split "<name> <rest...>" where name may be quoted; rest is kept verbatim."""
    lexer = shlex.shlex(raw, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    first = lexer.get_token()
    if first is None:
        return "", ""
    rest = lexer.instream.read()
    return first, rest.strip()


def cmd_help(state: AppState, args: list[str], raw: str) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], raw: str) -> str:
    settings = state.settings
    return (
        "Status:\n"
        f"  Database: {state.store.db_path} ({state.store.count()} memos)\n"
        f"  Audio storage: {getattr(settings, 'storage_dir', None)}\n"
        f"  Things installed: {'yes' if state.things.is_installed() else 'no'}"
    )


def cmd_load(state: AppState, args: list[str], raw: str) -> str:
    memos = state.store.load()
    if not memos:
        return "No memos."
    return "\n".join(_format_memo(i, m) for i, m in enumerate(memos, start=1))


def cmd_kill(state: AppState, args: list[str], raw: str) -> str:
    """
    /kill <name> [<name> ...]   -> delete memos (missing names are ignored)
    """
    if not args:
        return "Usage: /kill <name> [<name> ...]"
    n = state.store.delete(args)
    return f"Deleted {n} memo(s)."


def cmd_merge(state: AppState, args: list[str], raw: str) -> str:
    """
    /merge <name> <name> [...]  -> replace the memos with one combined memo
    """
    if len(set(args)) < 2:
        return "Usage: /merge <name> <name> [<name> ...]"
    merged = merge_memos(state.store, args)
    if merged is None:
        return "Nothing to merge (fewer than two of these memos exist)."
    return f"Merged into {merged.name} [{merged.label}]."


def cmd_set(state: AppState, args: list[str], raw: str) -> str:
    """
    /set <name> <new content...>
    """
    name, content = _split_first(raw)
    if not name or not content:
        return "Usage: /set <name> <new content>"
    n = state.store.update_content(name, content)
    if n == 0:
        return f"No memo named {name}."
    return f"Updated {name}."


def cmd_open(state: AppState, args: list[str], raw: str) -> str:
    if not args:
        return "Usage: /open <name> [<name> ...]"
    state.playback.play(args)
    return f"Playing {len(args)} file(s)."


def cmd_things(state: AppState, args: list[str], raw: str) -> str:
    if not args:
        return "Usage: /things <name> [<name> ...]"
    items = state.things.export(args)
    if not items:
        return "No matching memos."
    return f"Sent {len(items)} to-do(s) to Things."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show database/storage/Things status.")
registry.register("load", cmd_load, help_text="List all memos (sorted by name).", aliases=["ls"])
registry.register("kill", cmd_kill, help_text="Delete memos: /kill <name>...", aliases=["rm"])
registry.register("merge", cmd_merge, help_text="Merge memos into one: /merge <name> <name>...")
registry.register("set", cmd_set, help_text="Replace memo text: /set <name> <content>.")
registry.register("open", cmd_open, help_text="Play memo audio in VLC: /open <name>...", aliases=["play"])
registry.register("things", cmd_things, help_text="Add memos to the Things inbox: /things <name>...")

# src/memo_manager/things/items.py

"""
Things 3 JSON items.

See https://culturedcode.com/things/support/articles/2803573/#json

Wire shape of one item:
    {"type": "to-do", "attributes": {"title": "...", "notes": null}}
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any, ClassVar
from urllib.parse import quote, urlencode

from ..memos.models import Memo

THINGS_JSON_URL = "things:///json"


class TaskItem:
    """Base for exportable items; subclasses set `type` and are dataclasses."""

    __slots__ = ()

    type: ClassVar[str]

    def attributes(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]

    def to_json(self) -> dict[str, Any]:
        return {"type": self.type, "attributes": self.attributes()}


@dataclass(frozen=True, slots=True)
class Todo(TaskItem):
    type: ClassVar[str] = "to-do"

    title: str
    notes: str | None = None


def todo_from_memo(memo: Memo) -> Todo:
    # Only the transcript travels; name and label stay behind.
    return Todo(title=memo.content)


def encode_items(items: Iterable[TaskItem]) -> str:
    return json.dumps(
        [item.to_json() for item in items],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def build_things_url(items: Iterable[TaskItem], *, reveal: bool = True) -> str:
    query = urlencode(
        {"data": encode_items(items), "reveal": "true" if reveal else "false"},
        quote_via=quote,
    )
    return f"{THINGS_JSON_URL}?{query}"

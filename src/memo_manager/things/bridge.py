# src/memo_manager/things/bridge.py

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from ..core.ports import UrlOpener
from ..errors import DispatchError, ExternalAppUnavailableError
from ..memos.store import MemoStore
from .items import TaskItem, build_things_url, todo_from_memo

logger = logging.getLogger(__name__)

DEFAULT_THINGS_APP_PATH = Path("/Applications/Things3.app")


def open_url(url: str) -> None:
    """Hand a URL to the macOS URL handler. Does not wait for the app."""
    subprocess.Popen(["open", url])


class ThingsBridge:
    """
    Export memos to the Things inbox via the things:///json URL scheme.

    Fire-and-forget: export() returns once `open` has been launched, with no
    confirmation that Things actually created the to-dos. Memos are never
    deleted from the store.
    """

    def __init__(
        self,
        store: MemoStore,
        *,
        app_path: str | Path = DEFAULT_THINGS_APP_PATH,
        opener: UrlOpener | None = None,
    ) -> None:
        self._store = store
        self._app_path = Path(app_path)
        self._opener: UrlOpener = opener or open_url

    def is_installed(self) -> bool:
        return self._app_path.exists()

    def export(self, names: Iterable[str]) -> list[TaskItem]:
        if not self.is_installed():
            raise ExternalAppUnavailableError(
                "Things is not installed", details={"app_path": str(self._app_path)}
            )

        # The store lock is released here, before any process is spawned.
        memos = self._store.select(names)
        if not memos:
            logger.info("Things export: no matching memos, nothing sent")
            return []

        items: list[TaskItem] = [todo_from_memo(m) for m in memos]
        url = build_things_url(items, reveal=True)

        try:
            self._opener(url)
        except OSError as e:
            raise DispatchError(f"Couldn't open Things URL: {e}") from e

        logger.info("Things export: dispatched %d to-dos", len(items))
        return items

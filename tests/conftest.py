# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from memo_manager.core.state import AppState
from memo_manager.memos.models import Memo
from memo_manager.memos.store import MemoStore
from memo_manager.playback import PlaybackGateway
from memo_manager.things.bridge import ThingsBridge

from .fakes import RecordingOpener, RecordingSpawner


@pytest.fixture()
def store(tmp_path: Path):
    s = MemoStore(tmp_path / "memos.sqlite")
    yield s
    s.close()


@pytest.fixture()
def seeded_store(store: MemoStore) -> MemoStore:
    for memo in (
        Memo(name="b", content="world", label="unknown"),
        Memo(name="a", content="hello", label="work"),
        Memo(name="c", content="third", label=None),
    ):
        store.insert(memo)
    return store


@pytest.fixture()
def storage_dir(tmp_path: Path) -> Path:
    d = tmp_path / "audio"
    d.mkdir()
    return d


@pytest.fixture()
def things_app(tmp_path: Path) -> Path:
    app = tmp_path / "Things3.app"
    app.mkdir()
    return app


@pytest.fixture()
def opener() -> RecordingOpener:
    return RecordingOpener()


@pytest.fixture()
def spawner() -> RecordingSpawner:
    return RecordingSpawner()


@pytest.fixture()
def settings(tmp_path: Path, storage_dir: Path, things_app: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the commands.

    A SimpleNamespace rather than the real config keeps tests independent of
    the process environment and any local .env.
    """
    return SimpleNamespace(
        db_path=tmp_path / "memos.sqlite",
        storage_dir=storage_dir,
        things_app_path=things_app,
        player_path="/usr/bin/vlc",
    )


@pytest.fixture()
def state(settings, seeded_store, opener, spawner) -> AppState:
    """
    AppState wired with recording fakes for everything outside the process.

    The SQLite store is real: its behaviour is part of what we test.
    """
    return AppState(
        settings=settings,
        store=seeded_store,
        things=ThingsBridge(seeded_store, app_path=settings.things_app_path, opener=opener),
        playback=PlaybackGateway(
            settings.storage_dir,
            player_path=settings.player_path,
            platform="darwin",
            spawn=spawner,
        ),
    )

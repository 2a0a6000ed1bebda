# tests/test_memo_store.py

from __future__ import annotations

import random
import sqlite3
import threading
import time
from pathlib import Path

import pytest

from memo_manager.errors import DuplicateNameError, StoreError
from memo_manager.memos.models import Memo
from memo_manager.memos.store import MemoStore


def test_load_is_sorted_by_name_for_any_insert_order(store: MemoStore) -> None:
    names = [f"2023-05-{d:02d} memo.m4a" for d in range(1, 15)]
    shuffled = names[:]
    random.Random(7).shuffle(shuffled)
    for n in shuffled:
        store.insert(Memo(name=n, content=f"text {n}"))

    loaded = store.load()
    assert [m.name for m in loaded] == sorted(names)


def test_insert_duplicate_name_is_rejected(seeded_store: MemoStore) -> None:
    with pytest.raises(DuplicateNameError) as exc:
        seeded_store.insert(Memo(name="a", content="again"))
    assert exc.value.name == "a"
    assert [m.content for m in seeded_store.load() if m.name == "a"] == ["hello"]


def test_label_none_and_unknown_are_kept_apart(seeded_store: MemoStore) -> None:
    labels = {m.name: m.label for m in seeded_store.load()}
    assert labels == {"a": "work", "b": "unknown", "c": None}


def test_delete_ignores_missing_names(seeded_store: MemoStore) -> None:
    assert seeded_store.delete(["a", "nope"]) == 1
    assert [m.name for m in seeded_store.load()] == ["b", "c"]

    assert seeded_store.delete(["nope"]) == 0
    assert seeded_store.delete([]) == 0
    assert seeded_store.count() == 2


def test_update_content_keeps_name_and_reports_no_match(seeded_store: MemoStore) -> None:
    assert seeded_store.update_content("a", "hello again") == 1
    a = seeded_store.select(["a"])[0]
    assert a.name == "a"
    assert a.content == "hello again"
    assert a.label == "work"

    assert seeded_store.update_content("missing", "x") == 0
    assert seeded_store.count() == 3


def test_select_orders_and_skips_missing(seeded_store: MemoStore) -> None:
    rows = seeded_store.select(["c", "zzz", "a"])
    assert [m.name for m in rows] == ["a", "c"]


def test_data_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "memos.sqlite"
    s1 = MemoStore(db)
    s1.insert(Memo(name="x", content="buy milk", label="l"))
    s1.close()

    s2 = MemoStore(db)
    try:
        assert s2.load() == [Memo(name="x", content="buy milk", label="l")]
    finally:
        s2.close()


def test_closed_store_raises_store_error(tmp_path: Path) -> None:
    s = MemoStore(tmp_path / "memos.sqlite")
    s.close()
    s.close()  # idempotent
    with pytest.raises(StoreError):
        s.load()


def test_session_releases_lock_after_error(seeded_store: MemoStore) -> None:
    with pytest.raises(RuntimeError):
        with seeded_store.session():
            raise RuntimeError("boom")

    # Would block forever if the lock leaked.
    assert seeded_store.count() == 3


def test_session_excludes_other_callers(seeded_store: MemoStore) -> None:
    done = threading.Event()

    def reader() -> None:
        seeded_store.load()
        done.set()

    with seeded_store.session() as s:
        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)
        assert not done.is_set()
        s.delete(["a"])

    t.join(timeout=5)
    assert done.is_set()
    assert seeded_store.count() == 2


def test_sqlite_failures_surface_as_store_error(seeded_store: MemoStore) -> None:
    other = sqlite3.connect(seeded_store.db_path)
    other.execute("DROP TABLE memos")
    other.close()

    with pytest.raises(StoreError, match="no such table: memos") as exc:
        seeded_store.load()
    assert isinstance(exc.value.__cause__, sqlite3.Error)

    # Lock released: recreate the table through a fresh session.
    with seeded_store.session() as s:
        s.create_schema()
    assert seeded_store.count() == 0

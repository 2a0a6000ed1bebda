# tests/test_importer.py

from __future__ import annotations

from pathlib import Path

import pytest

from memo_manager.ingest.importer import MemoImporter, normalize_label, read_duration
from memo_manager.memos.models import Memo
from memo_manager.memos.store import MemoStore

from .fakes import FakeLabeller, FakeTranscriber


def _audio(d: Path, name: str, size: int = 16) -> Path:
    p = d / name
    p.write_bytes(b"\0" * size)
    return p


def _importer(store: MemoStore, transcriber, labeller, **kwargs) -> MemoImporter:
    kwargs.setdefault("duration_reader", lambda path: 1.5)
    return MemoImporter(store, transcriber, labeller, **kwargs)


def test_import_transcribes_only_new_small_files(store: MemoStore, storage_dir: Path) -> None:
    store.insert(Memo(name="old.m4a", content="already there", label="misc"))
    _audio(storage_dir, "old.m4a")
    _audio(storage_dir, "new.m4a")
    _audio(storage_dir, "big.m4a", size=200)
    _audio(storage_dir, "silent.m4a")

    transcriber = FakeTranscriber({"new.m4a": "call mom", "big.m4a": "too big", "silent.m4a": None})
    importer = _importer(store, transcriber, FakeLabeller(), max_file_bytes=100)

    inserted = importer.import_files(importer.discover(str(storage_dir / "*.m4a")))

    assert inserted == 1
    assert sorted(p.name for p in transcriber.calls) == ["new.m4a", "silent.m4a"]
    assert store.select(["new.m4a"]) == [Memo(name="new.m4a", content="call mom", label=None)]
    assert store.select(["old.m4a"])[0].content == "already there"
    assert store.count() == 2


def test_corrupted_files_are_skipped(store: MemoStore, storage_dir: Path, caplog) -> None:
    broken = _audio(storage_dir, "broken.m4a")
    fine = _audio(storage_dir, "fine.m4a")
    transcriber = FakeTranscriber({"broken.m4a": "never", "fine.m4a": "ok"})
    durations = {broken: None, fine: 4.2}
    importer = _importer(store, transcriber, FakeLabeller(), duration_reader=durations.get)

    with caplog.at_level("WARNING", logger="memo_manager.ingest.importer"):
        assert importer.import_files([broken, fine]) == 1

    assert [p.name for p in transcriber.calls] == ["fine.m4a"]
    assert [m.name for m in store.load()] == ["fine.m4a"]
    assert "File seems to be corrupted" in caplog.text


def test_read_duration_rejects_non_audio(tmp_path: Path) -> None:
    junk = tmp_path / "junk.m4a"
    junk.write_bytes(b"\0" * 64)
    assert read_duration(junk) is None


def test_discover_expands_home(monkeypatch, tmp_path: Path) -> None:
    home = tmp_path / "home"
    (home / "rec").mkdir(parents=True)
    _audio(home / "rec", "x.m4a")
    (home / "rec" / "notes.txt").write_text("no")
    monkeypatch.setenv("HOME", str(home))

    assert MemoImporter.discover("~/rec/*.m4a") == [home / "rec" / "x.m4a"]


def test_label_pending_stores_only_single_word_labels(store: MemoStore) -> None:
    store.insert(Memo(name="1", content="buy milk"))
    store.insert(Memo(name="2", content="idea for app"))
    store.insert(Memo(name="3", content="rambling"))
    store.insert(Memo(name="4", content="done", label="work"))
    store.insert(Memo(name="5", content="padded"))

    labeller = FakeLabeller(
        {"buy milk": "Shopping", "idea for app": "Ideas, maybe", "rambling": None, "padded": " home\n"}
    )
    importer = _importer(store, FakeTranscriber(), labeller)

    assert importer.label_pending() == 1

    labels = {m.name: m.label for m in store.load()}
    assert labels == {"1": "shopping", "2": None, "3": None, "4": "work", "5": None}
    assert sorted(labeller.calls) == ["buy milk", "idea for app", "padded", "rambling"]


def test_run_imports_then_labels(store: MemoStore, storage_dir: Path) -> None:
    _audio(storage_dir, "x.m4a")
    importer = _importer(
        store,
        FakeTranscriber({"x.m4a": "pick up parcel"}),
        FakeLabeller({"pick up parcel": "errands"}),
    )

    assert importer.run(str(storage_dir / "*.m4a")) == (1, 1)
    assert store.load() == [Memo(name="x.m4a", content="pick up parcel", label="errands")]


def test_one_failing_file_does_not_stop_the_batch(store: MemoStore, storage_dir: Path) -> None:
    class FlakyTranscriber(FakeTranscriber):
        def transcribe(self, path: Path) -> str | None:
            if path.name == "bad.m4a":
                raise OSError("disk error")
            return super().transcribe(path)

    paths = [_audio(storage_dir, "bad.m4a"), _audio(storage_dir, "good.m4a")]
    importer = _importer(store, FlakyTranscriber({"good.m4a": "ok"}), FakeLabeller())

    assert importer.import_files(paths) == 1
    assert [m.name for m in store.load()] == ["good.m4a"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("Work", "work"), ("  todo \n", None), ("two words", None), ("work.", None), ("", None), (None, None)],
)
def test_normalize_label(raw, expected) -> None:
    assert normalize_label(raw) == expected

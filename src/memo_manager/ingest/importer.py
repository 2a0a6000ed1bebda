# src/memo_manager/ingest/importer.py

from __future__ import annotations

import glob
import logging
import os
import re
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import mutagen
from tqdm import tqdm

from ..core.ports import Labeller, Transcriber
from ..errors import DuplicateNameError
from ..memos.models import Memo
from ..memos.store import MemoStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_BYTES = 3_000_000
_LABEL_RE = re.compile(r"^[a-z]+$")


def normalize_label(raw: str | None) -> str | None:
    """Lower-cased single word, or None if the answer is not a usable label."""
    if not raw:
        return None
    label = raw.lower()
    return label if _LABEL_RE.match(label) else None


def read_duration(path: Path) -> float | None:
    """Audio length in seconds, or None when the file can't be parsed."""
    try:
        audio = mutagen.File(path)
    except mutagen.MutagenError as e:
        logger.debug("Couldn't parse %s: %s", path, e)
        return None
    if audio is None or audio.info is None:
        return None
    return getattr(audio.info, "length", None) or None


class MemoImporter:
    """
    Turns new voice-memo audio files into memos, then labels unlabelled memos.

    - a file is skipped if a memo with its basename already exists
    - files larger than max_file_bytes are skipped
    - files without a readable duration are treated as corrupted and skipped
    - one failing file/memo is logged and does not stop the batch
    """

    def __init__(
        self,
        store: MemoStore,
        transcriber: Transcriber,
        labeller: Labeller,
        *,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        transcription_concurrency: int = 2,
        labelling_concurrency: int = 2,
        duration_reader: Callable[[Path], float | None] = read_duration,
    ) -> None:
        self._store = store
        self._transcriber = transcriber
        self._labeller = labeller
        self._max_file_bytes = int(max_file_bytes)
        self._transcription_concurrency = max(1, int(transcription_concurrency))
        self._labelling_concurrency = max(1, int(labelling_concurrency))
        self._duration_reader = duration_reader

    @property
    def store(self) -> MemoStore:
        return self._store

    @staticmethod
    def discover(pattern: str) -> list[Path]:
        pattern = os.path.expanduser(pattern)
        files = sorted(Path(p) for p in glob.glob(pattern, recursive=True))
        files = [f for f in files if f.is_file()]
        logger.info("Found %d memos", len(files))
        return files

    def _pending_files(self, paths: Iterable[Path]) -> list[Path]:
        out: list[Path] = []
        for path in paths:
            if self._store.exists(path.name):
                continue
            if path.stat().st_size > self._max_file_bytes:
                logger.info("Skipping large file %s", path)
                continue
            if not self._duration_reader(path):
                logger.warning("File seems to be corrupted: %s", path)
                continue
            out.append(path)
        return out

    def _import_one(self, path: Path) -> bool:
        text = self._transcriber.transcribe(path)
        if not text:
            logger.warning("No transcript for %s", path)
            return False
        try:
            self._store.insert(Memo(name=path.name, content=text, label=None))
        except DuplicateNameError:
            logger.info("Memo %s appeared while transcribing; keeping the existing one", path.name)
            return False
        logger.debug("Transcribed %s (%d chars)", path.name, len(text))
        return True

    def import_files(self, paths: Iterable[Path]) -> int:
        pending = self._pending_files(paths)
        if not pending:
            return 0

        logger.info("Transcribing %d file(s)...", len(pending))
        inserted = 0
        with ThreadPoolExecutor(max_workers=self._transcription_concurrency) as pool:
            futures = {pool.submit(self._import_one, p): p for p in pending}
            done = as_completed(futures)
            for fut in tqdm(done, total=len(futures), desc="Transcribing"):
                try:
                    if fut.result():
                        inserted += 1
                except Exception:
                    logger.exception("Import failed for %s", futures[fut])
        logger.info("Transcribed %d/%d file(s)", inserted, len(pending))
        return inserted

    def _label_one(self, memo: Memo) -> bool:
        raw = self._labeller.label(memo.content)
        label = normalize_label(raw)
        if label is None:
            logger.error("%s: unknown label %r", memo.name, raw)
            return False
        self._store.set_label(memo.name, label)
        return True

    def label_pending(self) -> int:
        memos = self._store.unlabelled()
        if not memos:
            return 0

        logger.info("Labelling %d memo(s)...", len(memos))
        labelled = 0
        with ThreadPoolExecutor(max_workers=self._labelling_concurrency) as pool:
            futures = {pool.submit(self._label_one, m): m for m in memos}
            done = as_completed(futures)
            for fut in tqdm(done, total=len(futures), desc="Labelling"):
                try:
                    if fut.result():
                        labelled += 1
                except Exception:
                    logger.exception("Labelling failed for %s", futures[fut].name)
        logger.info("Labelled %d/%d memo(s)", labelled, len(memos))
        return labelled

    def run(self, pattern: str) -> tuple[int, int]:
        inserted = self.import_files(self.discover(pattern))
        labelled = self.label_pending()
        return inserted, labelled

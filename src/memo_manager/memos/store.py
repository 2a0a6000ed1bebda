# src/memo_manager/memos/store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..errors import DuplicateNameError, StoreError
from .models import Memo

logger = logging.getLogger(__name__)

_COLUMNS = "name, content, label"


def _distinct(names: Iterable[str]) -> list[str]:
    return sorted({str(n) for n in names})


def _placeholders(n: int) -> str:
    return ",".join("?" for _ in range(n))


class MemoSession:
    """
    Raw SQL against the shared connection, valid only inside MemoStore.session().

    Holds no lock of its own: the owning session already has exclusive access,
    so several calls can be chained (select -> delete -> insert) without
    another caller observing the intermediate state.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @staticmethod
    def _row_to_memo(row: sqlite3.Row) -> Memo:
        return Memo(
            name=str(row["name"]),
            content=str(row["content"] or ""),
            label=row["label"],
        )

    def create_schema(self) -> None:
        # No migrations: an existing table is used as-is.
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS memos (
                name TEXT PRIMARY KEY,
                content TEXT NOT NULL,
                label TEXT
            )
            """
        )
        self._conn.commit()

    def load(self) -> list[Memo]:
        cur = self._conn.execute(f"SELECT {_COLUMNS} FROM memos ORDER BY name ASC")
        return [self._row_to_memo(r) for r in cur.fetchall()]

    def select(self, names: Iterable[str]) -> list[Memo]:
        wanted = _distinct(names)
        if not wanted:
            return []
        cur = self._conn.execute(
            f"SELECT {_COLUMNS} FROM memos WHERE name IN ({_placeholders(len(wanted))}) "
            "ORDER BY name ASC",
            wanted,
        )
        return [self._row_to_memo(r) for r in cur.fetchall()]

    def unlabelled(self) -> list[Memo]:
        cur = self._conn.execute(
            f"SELECT {_COLUMNS} FROM memos WHERE label IS NULL ORDER BY name ASC"
        )
        return [self._row_to_memo(r) for r in cur.fetchall()]

    def exists(self, name: str) -> bool:
        cur = self._conn.execute("SELECT 1 FROM memos WHERE name = ? LIMIT 1", (name,))
        return cur.fetchone() is not None

    def count(self) -> int:
        (n,) = self._conn.execute("SELECT COUNT(*) FROM memos").fetchone()
        return int(n)

    def delete(self, names: Iterable[str]) -> int:
        doomed = _distinct(names)
        if not doomed:
            return 0
        cur = self._conn.execute(
            f"DELETE FROM memos WHERE name IN ({_placeholders(len(doomed))})",
            doomed,
        )
        self._conn.commit()
        return cur.rowcount

    def insert(self, memo: Memo) -> None:
        # Checked under the session lock; a pre-existing table may lack the key.
        if self.exists(memo.name):
            raise DuplicateNameError(memo.name)
        self._conn.execute(
            "INSERT INTO memos (name, content, label) VALUES (?, ?, ?)",
            (memo.name, memo.content, memo.label),
        )
        self._conn.commit()

    def update_content(self, name: str, new_content: str) -> int:
        cur = self._conn.execute(
            "UPDATE memos SET content = ? WHERE name = ?",
            (new_content, name),
        )
        self._conn.commit()
        return cur.rowcount

    def set_label(self, name: str, label: str | None) -> int:
        cur = self._conn.execute(
            "UPDATE memos SET label = ? WHERE name = ?",
            (label, name),
        )
        self._conn.commit()
        return cur.rowcount


class MemoStore:
    """
    SQLite-backed memo store.

    Thread-safety:
    - exactly one persistent connection, guarded by a single lock
    - every operation holds the lock for its whole duration
    - callers that need several statements in one critical section use session()

    Zero-row deletes/updates are not errors; the affected row count is returned
    so callers that care can tell "no such memo" apart.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._conn: sqlite3.Connection | None = sqlite3.connect(
                str(self._db_path), timeout=30.0, check_same_thread=False
            )
        except sqlite3.Error as e:
            raise StoreError(f"Couldn't open database {self._db_path}: {e}") from e
        self._conn.row_factory = sqlite3.Row
        self._configure_conn(self._conn)
        self._ensure_schema()
        logger.info("MemoStore ready db=%s total=%s", self._db_path, self.count())

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
            logger.debug("MemoStore closed db=%s", self._db_path)

    # ---- low-level helpers ----

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.rollback()

    def _ensure_schema(self) -> None:
        with self.session() as s:
            s.create_schema()

    @contextlib.contextmanager
    def session(self) -> Iterator[MemoSession]:
        """
        Exclusive access to the shared connection.

        The lock is released on every exit path. sqlite3 errors are rolled back
        (uncommitted statements only) and re-raised as StoreError.
        """
        with self._lock:
            conn = self._conn
            if conn is None:
                raise StoreError(f"Store is closed: {self._db_path}")
            try:
                yield MemoSession(conn)
            except sqlite3.Error as e:
                self._rollback(conn)
                raise StoreError(str(e)) from e
            except Exception:
                self._rollback(conn)
                raise

    # ---- public API ----

    def load(self) -> list[Memo]:
        with self.session() as s:
            return s.load()

    def select(self, names: Iterable[str]) -> list[Memo]:
        with self.session() as s:
            return s.select(names)

    def unlabelled(self) -> list[Memo]:
        with self.session() as s:
            return s.unlabelled()

    def exists(self, name: str) -> bool:
        with self.session() as s:
            return s.exists(name)

    def count(self) -> int:
        with self.session() as s:
            return s.count()

    def delete(self, names: Iterable[str]) -> int:
        names = list(names)
        with self.session() as s:
            n = s.delete(names)
        logger.debug("Deleted memos requested=%d affected=%d", len(set(names)), n)
        return n

    def insert(self, memo: Memo) -> None:
        with self.session() as s:
            s.insert(memo)
        logger.debug("Inserted memo name=%s label=%s", memo.name, memo.label)

    def update_content(self, name: str, new_content: str) -> int:
        with self.session() as s:
            n = s.update_content(name, new_content)
        if n == 0:
            logger.debug("update_content: no memo named %s", name)
        return n

    def set_label(self, name: str, label: str | None) -> int:
        with self.session() as s:
            n = s.set_label(name, label)
        if n == 0:
            logger.debug("set_label: no memo named %s", name)
        return n

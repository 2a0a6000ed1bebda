# src/memo_manager/memos/merge.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..errors import DuplicateNameError
from .models import UNKNOWN_LABEL, Memo
from .store import MemoStore

logger = logging.getLogger(__name__)

NAME_SEPARATOR = ","
CONTENT_SEPARATOR = "\n\n"


def pick_label(labels: Iterable[str | None]) -> str:
    """First real label; "unknown" and None both count as a miss."""
    for label in labels:
        if label is not None and label != UNKNOWN_LABEL:
            return label
    return UNKNOWN_LABEL


def combine_memos(memos: Sequence[Memo]) -> Memo:
    """
    Fold memos (already sorted by name) into one.

    name:    names joined with ","
    content: contents joined with a blank line
    label:   see pick_label(); never None
    """
    if not memos:
        raise ValueError("combine_memos needs at least one memo")
    return Memo(
        name=NAME_SEPARATOR.join(m.name for m in memos),
        content=CONTENT_SEPARATOR.join(m.content for m in memos),
        label=pick_label(m.label for m in memos),
    )
def merge_memos(store: MemoStore, names: Iterable[str]) -> Memo | None:
    """
    Replace the named memos with a single combined memo.

    Fewer than two distinct names, or fewer than two of them present in the
    store, is a no-op returning None. Missing names are skipped.

    Select, delete and insert run under one store session, so no other caller
    can observe the group half-merged. If a memo already carries the merged
    name, DuplicateNameError is raised before anything is deleted. The delete
    is committed before the insert: a connection fault during the insert
    leaves the originals gone and raises StoreError (no automatic retry).
    """
    wanted = set(names)
    if len(wanted) < 2:
        return None

    with store.session() as s:
        rows = s.select(wanted)
        if len(rows) < 2:
            logger.debug(
                "Merge skipped: %d of %d requested memos exist", len(rows), len(wanted)
            )
            return None

        merged = combine_memos(rows)
        if s.exists(merged.name):
            logger.warning("Merge refused: memo %s already exists", merged.name)
            raise DuplicateNameError(merged.name)

        s.delete(m.name for m in rows)
        try:
            s.insert(merged)
        except Exception:
            logger.error(
                "Merge insert failed after deleting %s; merged memo %s was not written",
                [m.name for m in rows],
                merged.name,
            )
            raise

    logger.info("Merged %d memos into %s (label=%s)", len(rows), merged.name, merged.label)
    return merged

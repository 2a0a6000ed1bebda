# src/memo_manager/memos/models.py

from __future__ import annotations

from dataclasses import dataclass

# Explicit "classified as unknown", distinct from label=None (never classified).
UNKNOWN_LABEL = "unknown"


@dataclass(frozen=True, slots=True)
class Memo:
    """
    One transcribed voice memo.

    - name: unique id (the audio file name, or a comma-joined list after a merge)
    - content: transcript text
    - label: classification, None when unclassified
    """

    name: str
    content: str
    label: str | None = None

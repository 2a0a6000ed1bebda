# src/memo_manager/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols for everything that leaves the process
(URL handler, player process, OpenAI). Tests swap in recording fakes.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class UrlOpener(Protocol):
    """Hands a URL to the OS URL handler (macOS `open`). Fire-and-forget."""

    def __call__(self, url: str) -> None: ...


class ProcessSpawner(Protocol):
    """Starts a detached process; must not wait for it to exit."""

    def __call__(self, args: Sequence[str], *, cwd: Path) -> None: ...


class Transcriber(Protocol):
    """Speech-to-text for one audio file. None means "no usable transcript"."""

    def transcribe(self, path: Path) -> str | None: ...


class Labeller(Protocol):
    """Classifies one transcript. Returns the raw model answer or None."""

    def label(self, transcript: str) -> str | None: ...

# src/memo_manager/errors.py

"""Exceptions raised by the memo core.

Every error carries a human-readable message; front-ends show ``str(exc)``
verbatim. Missing audio files use the builtin ``FileNotFoundError``.
"""

from __future__ import annotations

from typing import Any


class MemoManagerError(Exception):
    """Base exception for all memo-manager errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class StoreError(MemoManagerError):
    """Connection or query failure against the memos database."""


class DuplicateNameError(StoreError):
    """Insert collided with an existing memo name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Memo {name!r} already exists", details={"name": name})
        self.name = name


class ExternalAppUnavailableError(MemoManagerError):
    """The external task application is not installed."""


class CapabilityError(MemoManagerError):
    """Operation is not supported on this host platform."""


class DispatchError(MemoManagerError):
    """Spawning an external process (URL open, player) failed."""


class ConfigError(MemoManagerError):
    """Required configuration is missing at startup."""

# src/memo_manager/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; entrypoints call require_core() before
  building the store, so a missing database/storage path is a startup failure.
- The original variable names (MEMOS_DB, VOICE_MEMOS_STORAGE, ...) keep working.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

ENV_PREFIX = "MEMOS"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Core paths (required) ----
    db_path: Optional[Path]
    storage_dir: Optional[Path]

    # ---- External apps ----
    player_path: str
    things_app_path: Path

    # ---- Ingestion ----
    memos_glob: Optional[str]
    openai_api_key: Optional[str]
    openai_base_url: Optional[str]
    categorization_prompt: Optional[str]
    transcription_model: str
    labelling_model: str
    transcription_concurrency: int
    labelling_concurrency: int
    max_file_bytes: int

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "memo-manager")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/memo-manager")) or Path(".local/memo-manager")

        db_raw = _first_env("MEMOS_DB", _k("DB_PATH"))
        storage_raw = _first_env("VOICE_MEMOS_STORAGE", _k("STORAGE_DIR"))

        player_path = _env(_k("PLAYER_PATH"), "/Applications/VLC.app/Contents/MacOS/VLC")
        things_app_path = Path(_env(_k("THINGS_APP_PATH"), "/Applications/Things3.app"))

        memos_glob = _first_env("VOICE_MEMOS_GLOB", _k("GLOB"))
        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY")
        openai_base_url = _first_env(_k("OPENAI_BASE_URL"), "OPENAI_BASE_URL")
        categorization_prompt = _first_env("CATEGORIZATION_PROMPT", _k("CATEGORIZATION_PROMPT"))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=Path(db_raw).expanduser() if db_raw else None,
            storage_dir=Path(storage_raw).expanduser() if storage_raw else None,
            player_path=player_path,
            things_app_path=things_app_path,
            memos_glob=os.path.expanduser(memos_glob) if memos_glob else None,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            categorization_prompt=categorization_prompt,
            transcription_model=_env(_k("TRANSCRIPTION_MODEL"), "whisper-1"),
            labelling_model=_env(_k("LABELLING_MODEL"), "gpt-3.5-turbo"),
            transcription_concurrency=max(1, _env_int(_k("TRANSCRIPTION_CONCURRENCY"), 2)),
            labelling_concurrency=max(1, _env_int(_k("LABELLING_CONCURRENCY"), 2)),
            max_file_bytes=_env_int(_k("MAX_FILE_BYTES"), 3_000_000),
        )

    def require_core(self) -> None:
        """Raise ConfigError listing every missing required variable."""
        missing: list[str] = []
        if self.db_path is None:
            missing.append("MEMOS_DB")
        if self.storage_dir is None:
            missing.append("VOICE_MEMOS_STORAGE")
        if missing:
            raise ConfigError(
                f"Missing required environment variable(s): {', '.join(missing)}",
                details={"missing": missing},
            )

    def require_ingest(self) -> None:
        missing: list[str] = []
        if self.db_path is None:
            missing.append("MEMOS_DB")
        if not self.memos_glob:
            missing.append("VOICE_MEMOS_GLOB")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if not self.categorization_prompt:
            missing.append("CATEGORIZATION_PROMPT")
        if missing:
            raise ConfigError(
                f"Missing required environment variable(s): {', '.join(missing)}",
                details={"missing": missing},
            )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS

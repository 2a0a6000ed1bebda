# src/memo_manager/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- checks the required settings once,
- opens the single MemoStore connection,
- hands that one store to every component that needs it.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..ingest.importer import MemoImporter
from ..llm.client import OpenAILabeller, OpenAITranscriber, build_client
from ..memos.store import MemoStore
from ..playback import PlaybackGateway
from ..things.bridge import ThingsBridge

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Raises ConfigError if MEMOS_DB / VOICE_MEMOS_STORAGE are missing.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.require_core()

    store = MemoStore(settings.db_path)
    return AppState(
        settings=settings,
        store=store,
        things=ThingsBridge(store, app_path=settings.things_app_path),
        playback=PlaybackGateway(settings.storage_dir, player_path=settings.player_path),
    )


def create_importer(*, settings=None) -> MemoImporter:
    if settings is None:
        settings = get_settings()

    settings.require_ingest()

    client = build_client(settings)
    return MemoImporter(
        MemoStore(settings.db_path),
        OpenAITranscriber(client, model=settings.transcription_model),
        OpenAILabeller(
            client,
            prompt=settings.categorization_prompt,
            model=settings.labelling_model,
        ),
        max_file_bytes=settings.max_file_bytes,
        transcription_concurrency=settings.transcription_concurrency,
        labelling_concurrency=settings.labelling_concurrency,
    )

# src/memo_manager/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..memos.store import MemoStore
from ..playback import PlaybackGateway
from ..things.bridge import ThingsBridge


@dataclass
class AppState:
    # Settings kept on the state so commands can report them (/status).
    settings: object

    store: MemoStore
    things: ThingsBridge
    playback: PlaybackGateway

# src/memo_manager/playback.py

from __future__ import annotations

import errno
import logging
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from .core.ports import ProcessSpawner
from .errors import CapabilityError, DispatchError

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_PATH = "/Applications/VLC.app/Contents/MacOS/VLC"
SUPPORTED_PLATFORM = "darwin"


def spawn_detached(args: Sequence[str], *, cwd: Path) -> None:
    subprocess.Popen(list(args), cwd=str(cwd))


class PlaybackGateway:
    """
    Play memo audio files with VLC, one playlist, exiting when done.

    All requested files are checked before anything is spawned: one missing
    file means nothing plays. Never touches the memo store.
    """

    def __init__(
        self,
        storage_dir: str | Path,
        *,
        player_path: str | Path = DEFAULT_PLAYER_PATH,
        platform: str | None = None,
        spawn: ProcessSpawner | None = None,
    ) -> None:
        self._storage_dir = Path(storage_dir)
        self._player_path = str(player_path)
        self._platform = platform if platform is not None else sys.platform
        self._spawn: ProcessSpawner = spawn or spawn_detached

    def play(self, names: Sequence[str]) -> None:
        if self._platform != SUPPORTED_PLATFORM:
            raise CapabilityError("This command is only available on macOS")

        names = list(names)
        if not names:
            return

        for name in names:
            path = self._storage_dir / name
            if not path.exists():
                raise FileNotFoundError(
                    errno.ENOENT, f"File {path} doesn't exist", str(path)
                )

        args = [self._player_path, "--play-and-exit", *names]
        try:
            self._spawn(args, cwd=self._storage_dir)
        except OSError as e:
            raise DispatchError(f"Couldn't start player {self._player_path}: {e}") from e

        logger.info("Playback started: %d file(s) from %s", len(names), self._storage_dir)

# src/memo_manager/cli/import_main.py

"""
Ingestion entrypoint (memo-import).

Transcribes audio files matching VOICE_MEMOS_GLOB that are not yet in the
database, then labels every memo that has no label.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_importer
from ..cli.main import configure_logging
from ..config import get_settings
from ..errors import ConfigError, StoreError

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    try:
        importer = create_importer(settings=settings)
    except (ConfigError, StoreError, RuntimeError) as e:
        logger.error("Startup failed: %s", e)
        sys.exit(2)

    try:
        inserted, labelled = importer.run(settings.memos_glob)
    finally:
        importer.store.close()

    logger.info("Import done: %d new memo(s), %d labelled", inserted, labelled)


if __name__ == "__main__":
    main()

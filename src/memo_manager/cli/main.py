# src/memo_manager/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (one shared MemoStore), then runs the
console front-end until /exit.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import ConfigError, StoreError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def configure_logging(settings) -> None:
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)


def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except (ConfigError, StoreError) as e:
        logger.error("Startup failed: %s", e)
        sys.exit(2)

    try:
        run_console_loop(state)
    finally:
        state.store.close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()

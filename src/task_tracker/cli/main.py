# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the data file), then runs the console
REPL in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.errors import TaskStoreLoadError

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except TaskStoreLoadError as e:
        logger.error("Cannot load %s: %s", settings.tasks_file, e)
        sys.exit(1)

    if settings.console_enabled:
        run_console_loop(state)
    else:
        logger.info("Console disabled; data loaded, nothing else to do.")

    logger.info("Bye.")


if __name__ == "__main__":
    main()

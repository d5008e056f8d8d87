# src/harvest/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the interpreter, then runs the console loop
in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_interpreter
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    # Replies go to stdout; keep the console log to warnings unless asked for DEBUG.
    if console_level > logging.DEBUG:
        console_level = max(console_level, logging.WARNING)

    setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level,
        log_to_file=settings.log_to_file,
    )

    logger.info("Starting %s...", settings.app_name)
    interpreter = create_interpreter(settings=settings)
    run_console_loop(interpreter, settings)
    logger.info("Bye.")


if __name__ == "__main__":
    main()

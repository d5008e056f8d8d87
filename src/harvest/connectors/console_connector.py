# src/harvest/connectors/console_connector.py

from __future__ import annotations

import logging

from ..cli.commands import CommandInterpreter
from ..config import Settings

logger = logging.getLogger(__name__)

RULE = "_" * 60


def _banner(app_name: str) -> str:
    return f"{RULE}\n Hello! I'm {app_name}\n What can I do for you?\n{RULE}"


def _flush(interpreter: CommandInterpreter) -> None:
    """Save on an abrupt end of input; show the warning if the save failed."""
    warning = interpreter.persist()
    if warning:
        print(warning.strip())


def run_console_loop(interpreter: CommandInterpreter, settings: Settings) -> None:
    """Read lines from stdin, forward each to the interpreter, print the reply."""
    logger.info("Console connector started.")
    if settings.show_banner:
        print(_banner(settings.app_name))

    while True:
        try:
            user_input = input()
        except EOFError:
            logger.info("Console EOF received, saving and exiting.")
            _flush(interpreter)
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, saving and exiting.")
            print()
            _flush(interpreter)
            break

        if not user_input.strip():
            continue

        try:
            reply = interpreter.execute(user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            print("Error: An unexpected error occurred.")
            continue

        print(reply.text.rstrip("\n"))
        print(RULE)
        if reply.should_exit:
            break

    logger.info("Console connector finished.")

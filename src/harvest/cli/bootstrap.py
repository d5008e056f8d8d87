# src/harvest/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures local (gitignored) directories exist,
- rehydrates the task store from the task file,
- wires store + codec into a CommandInterpreter.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..config import Settings, get_settings
from ..tasks.task_codec import TaskCodec
from ..tasks.task_store import TaskStore
from .commands import CommandInterpreter

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_interpreter(
    *,
    settings: Settings | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> CommandInterpreter:
    """
    Build a ready-to-use interpreter from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    try:
        _ensure_local_dirs(settings)
    except OSError:
        # Saving will report the problem per command; loading just finds nothing.
        logger.exception("Failed to create data directories under %s", settings.data_dir)

    codec = TaskCodec(settings.tasks_path)
    store = TaskStore(codec.load())
    logger.info("Task store ready path=%s total=%d", codec.path, store.size())
    return CommandInterpreter(store, codec, clock=clock)

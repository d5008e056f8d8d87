# src/harvest/tasks/task_codec.py

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .task_errors import ErrorKind, Ok, Result, err
from .task_models import Task, parse_record

logger = logging.getLogger(__name__)


def read_raw_lines(path: str | Path) -> list[bytes]:
    """Undecoded lines of a file; a missing file reads as empty."""
    path = Path(path)
    if not path.exists():
        return []
    return path.read_bytes().splitlines()


def decode_line(raw: bytes) -> str | None:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def read_lines(path: str | Path) -> list[str]:
    """
    All lines of a UTF-8 text file; a missing file reads as empty.

    Lines are decoded one by one, so a single corrupt line is dropped (and logged)
    without taking the rest of the file with it.
    """
    lines: list[str] = []
    for lineno, raw in enumerate(read_raw_lines(path), start=1):
        line = decode_line(raw)
        if line is None:
            logger.warning("Skipping undecodable line %d of %s", lineno, path)
            continue
        lines.append(line)
    return lines


def write_lines(path: str | Path, lines: Iterable[str]) -> None:
    """
    Overwrite `path` with `lines` (one per line).

    Writes a sibling .tmp file first and renames it into place, so a crash
    mid-write never leaves a half-written task file behind.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text("".join(f"{line}\n" for line in lines), "utf-8")
    os.replace(tmp, path)


class TaskCodec:
    """Full-file save/load of the task list in the pipe-delimited record format."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, tasks: Iterable[Task | None]) -> Result[int]:
        lines: list[str] = []
        for pos, task in enumerate(tasks, start=1):
            if task is None:
                logger.warning("Skipping empty task slot %d while saving.", pos)
                continue
            lines.append(task.to_record_string())

        try:
            write_lines(self._path, lines)
        except OSError as e:
            logger.exception("Failed to save tasks to %s", self._path)
            return err(ErrorKind.IO_ERROR, f"Error saving tasks to file: {e}")

        logger.debug("Saved %d tasks to %s", len(lines), self._path)
        return Ok(len(lines))

    def load(self) -> list[Task]:
        try:
            raw_lines = read_raw_lines(self._path)
        except OSError:
            logger.exception("Failed to load tasks from %s", self._path)
            return []

        tasks: list[Task] = []
        for lineno, raw in enumerate(raw_lines, start=1):
            line = decode_line(raw)
            if line is None:
                logger.warning("Skipping undecodable line %d of %s", lineno, self._path)
                continue
            if not line.strip():
                continue
            match parse_record(line):
                case Ok(value=task):
                    tasks.append(task)
                case failure:
                    logger.warning(
                        "Skipping line %d of %s: %s", lineno, self._path, failure.message
                    )

        logger.info("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

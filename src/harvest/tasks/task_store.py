# src/harvest/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from .task_errors import ErrorKind, Ok, Result, err
from .task_models import (
    INPUT_PATTERN,
    EventPayload,
    Task,
    make_deadline,
    make_event,
    make_todo,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task store.

    - Order is insertion order; the position is the only external identity
      (1-based in the public API, 0-based internally).
    - The store owns every Task it holds. all() hands out a tuple so callers
      cannot reorder or drop entries behind its back.
    - Validation happens before mutation: a failed call leaves the store untouched.
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = []
        for task in tasks or ():
            self.add_task(task)
        logger.debug("TaskStore ready total=%s", len(self._tasks))

    # ---- low-level helpers ----

    def _index(self, number: int) -> Result[int]:
        if number < 1 or number > len(self._tasks):
            return err(ErrorKind.INDEX_OUT_OF_RANGE, "Task number out of range.")
        return Ok(number - 1)

    # ---- queries ----

    def __len__(self) -> int:
        return len(self._tasks)

    def size(self) -> int:
        return len(self._tasks)

    def all(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def task_exists(self, description: str) -> bool:
        """Case-insensitive exact description match across all kinds."""
        needle = (description or "").strip().casefold()
        return any(t.description.casefold() == needle for t in self._tasks)

    def find_by_substring(self, keyword: str) -> list[Task]:
        needle = (keyword or "").casefold()
        return [t for t in self._tasks if needle in t.description.casefold()]

    def check_event_clash(self, start: datetime, end: datetime) -> str | None:
        """
        Advisory overlap check against stored events.

        Returns one warning line per clashing event, or None when nothing overlaps.
        Never blocks an insert.
        """
        lines: list[str] = []
        for task in self._tasks:
            payload = task.payload
            if isinstance(payload, EventPayload) and payload.overlaps(start, end):
                lines.append(
                    f'Warning: The event "{task.description}" overlaps with the new event.'
                )
        if not lines:
            return None
        logger.debug("Event clash start=%s end=%s clashes=%d", start, end, len(lines))
        return "\n".join(lines)

    # ---- mutations ----

    def add_task(self, task: Task) -> Task:
        if task is None:
            raise ValueError("task is required")
        self._tasks.append(task)
        return task

    def add_todo(self, description: str) -> Result[Task]:
        res = make_todo(description)
        if isinstance(res, Ok):
            self.add_task(res.value)
            logger.debug("Task added kind=%s total=%d", res.value.kind, len(self._tasks))
        return res

    def add_deadline(self, description: str, by_text: str) -> Result[Task]:
        if not description or not description.strip():
            return err(ErrorKind.EMPTY_DESCRIPTION, "Task description cannot be empty.")
        if not INPUT_PATTERN.fullmatch((by_text or "").strip()):
            return err(
                ErrorKind.INVALID_DEADLINE_FORMAT,
                "Invalid deadline format. Use: yyyy-MM-dd HH:mm",
            )

        res = make_deadline(description, by_text)
        if isinstance(res, Ok):
            self.add_task(res.value)
            logger.debug("Task added kind=%s total=%d", res.value.kind, len(self._tasks))
        return res

    def add_event(self, description: str, from_text: str, to_text: str) -> Result[Task]:
        if not description or not description.strip():
            return err(ErrorKind.EMPTY_DESCRIPTION, "Event description cannot be empty.")
        if not from_text or not from_text.strip() or not to_text or not to_text.strip():
            return err(
                ErrorKind.MISSING_TIME_FIELD,
                "Both start time (/from) and end time (/to) must be provided.",
            )
        for text in (from_text, to_text):
            if not INPUT_PATTERN.fullmatch(text.strip()):
                return err(
                    ErrorKind.INVALID_TIME_FORMAT,
                    "Invalid time format. Use: yyyy-MM-dd HH:mm",
                )

        res = make_event(description, from_text, to_text)
        if isinstance(res, Ok):
            self.add_task(res.value)
            logger.debug("Task added kind=%s total=%d", res.value.kind, len(self._tasks))
        return res

    def mark_done(self, number: int) -> Result[Task]:
        match self._index(number):
            case Ok(value=i):
                task = self._tasks[i]
                task.mark_done()
                logger.debug("Task %d marked done", number)
                return Ok(task)
            case failure:
                return failure

    def mark_not_done(self, number: int) -> Result[Task]:
        match self._index(number):
            case Ok(value=i):
                task = self._tasks[i]
                task.mark_not_done()
                logger.debug("Task %d marked not done", number)
                return Ok(task)
            case failure:
                return failure

    def delete(self, number: int) -> Result[Task]:
        match self._index(number):
            case Ok(value=i):
                task = self._tasks.pop(i)
                logger.debug("Task %d deleted total=%d", number, len(self._tasks))
                return Ok(task)
            case failure:
                return failure

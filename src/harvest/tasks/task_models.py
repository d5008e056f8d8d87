# src/harvest/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Union

from .task_errors import ErrorKind, Ok, Result, err

# Machine format used in commands and on disk; display format is for listings only.
INPUT_FORMAT = "%Y-%m-%d %H:%M"
INPUT_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}")

RECORD_SEPARATOR = " | "
STATUS_DONE = "X"
STATUS_NOT_DONE = "0"


class TaskKind(StrEnum):
    """Task kind; the value doubles as the TYPE token of a persisted record."""

    TODO = "TODO"
    DEADLINE = "DEADLINE"
    EVENT = "EVENT"

    @property
    def letter(self) -> str:
        return self.value[0]


@dataclass(frozen=True, slots=True)
class ToDoPayload:
    pass


@dataclass(frozen=True, slots=True)
class DeadlinePayload:
    by: datetime


@dataclass(frozen=True, slots=True)
class EventPayload:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("event start must not be after its end")

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open interval test: [start, end) against [self.start, self.end)."""
        return start < self.end and end > self.start


Payload = Union[ToDoPayload, DeadlinePayload, EventPayload]


def format_display_time(value: datetime) -> str:
    """e.g. 'Jan 01 2099, 9:00 am'."""
    hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    return f"{value:%b %d %Y}, {hour}:{value:%M} {suffix}"


def format_input_time(value: datetime) -> str:
    return value.strftime(INPUT_FORMAT)


def parse_datetime(text: str) -> Result[datetime]:
    """
    Strict yyyy-MM-dd HH:mm parsing.

    strptime alone accepts single-digit fields, so the shape is checked first.
    """
    text = (text or "").strip()
    if not INPUT_PATTERN.fullmatch(text):
        return err(
            ErrorKind.INVALID_DATE_FORMAT,
            f"Invalid date format '{text}'. Use yyyy-MM-dd HH:mm (e.g., 2023-01-22 18:00)",
        )
    try:
        return Ok(datetime.strptime(text, INPUT_FORMAT))
    except ValueError:
        return err(
            ErrorKind.INVALID_DATE_FORMAT,
            f"Invalid date '{text}'. Use yyyy-MM-dd HH:mm (e.g., 2023-01-22 18:00)",
        )


@dataclass(slots=True)
class Task:
    description: str
    payload: Payload = field(default_factory=ToDoPayload)
    is_done: bool = False

    def __setattr__(self, name: str, value: object) -> None:
        # description is fixed once set by __init__
        if name == "description" and hasattr(self, "description"):
            raise AttributeError("Task.description is read-only")
        object.__setattr__(self, name, value)

    @property
    def kind(self) -> TaskKind:
        match self.payload:
            case DeadlinePayload():
                return TaskKind.DEADLINE
            case EventPayload():
                return TaskKind.EVENT
            case _:
                return TaskKind.TODO

    def mark_done(self) -> None:
        self.is_done = True

    def mark_not_done(self) -> None:
        self.is_done = False

    @property
    def status_glyph(self) -> str:
        return "X" if self.is_done else " "

    def to_display_string(self) -> str:
        head = f"{self.kind.letter} [{self.status_glyph}] {self.description}"
        match self.payload:
            case DeadlinePayload(by=by):
                return f"{head} (by: {format_display_time(by)})"
            case EventPayload(start=start, end=end):
                return (
                    f"{head} (from: {format_display_time(start)} "
                    f"to: {format_display_time(end)})"
                )
            case _:
                return head

    def to_record_string(self) -> str:
        fields = [
            self.kind.value,
            STATUS_DONE if self.is_done else STATUS_NOT_DONE,
            self.description,
        ]
        match self.payload:
            case DeadlinePayload(by=by):
                fields.append(format_input_time(by))
            case EventPayload(start=start, end=end):
                fields.extend([format_input_time(start), format_input_time(end)])
        return RECORD_SEPARATOR.join(fields)

    def __str__(self) -> str:
        return self.to_display_string()


# ---- factories ----


def make_todo(description: str) -> Result[Task]:
    description = (description or "").strip()
    if not description:
        return err(ErrorKind.EMPTY_DESCRIPTION, "Task description cannot be empty!")
    return Ok(Task(description))


def make_deadline(description: str, by_text: str) -> Result[Task]:
    description = (description or "").strip()
    if not description:
        return err(ErrorKind.EMPTY_DESCRIPTION, "Task description cannot be empty!")

    match parse_datetime(by_text):
        case Ok(value=by):
            return Ok(Task(description, DeadlinePayload(by)))
        case failure:
            return failure


def make_event(description: str, from_text: str, to_text: str) -> Result[Task]:
    description = (description or "").strip()
    if not description:
        return err(ErrorKind.EMPTY_DESCRIPTION, "Event description cannot be empty!")

    start_res = parse_datetime(from_text)
    if not isinstance(start_res, Ok):
        return start_res
    end_res = parse_datetime(to_text)
    if not isinstance(end_res, Ok):
        return end_res

    if start_res.value > end_res.value:
        return err(ErrorKind.INVALID_TIME_ORDER, "Start time cannot be after end time!")
    return Ok(Task(description, EventPayload(start_res.value, end_res.value)))


# ---- record grammar ----

_REQUIRED_FIELDS = {
    TaskKind.TODO: 3,
    TaskKind.DEADLINE: 4,
    TaskKind.EVENT: 5,
}


def parse_record(line: str) -> Result[Task]:
    """
    Rebuild a Task from one persisted line:

        TODO | <X|0> | <description>
        DEADLINE | <X|0> | <description> | <yyyy-MM-dd HH:mm>
        EVENT | <X|0> | <description> | <yyyy-MM-dd HH:mm> | <yyyy-MM-dd HH:mm>

    The description may itself contain the separator, so the fixed fields are
    taken from both ends and whatever lies between is the description.
    """
    parts = line.rstrip("\r\n").split(RECORD_SEPARATOR)
    if len(parts) < 3:
        return err(ErrorKind.PARSE_ERROR, f"Too few fields in record: {line!r}")

    try:
        kind = TaskKind(parts[0].strip())
    except ValueError:
        return err(ErrorKind.PARSE_ERROR, f"Unknown task type {parts[0]!r}")

    if len(parts) < _REQUIRED_FIELDS[kind]:
        return err(
            ErrorKind.PARSE_ERROR,
            f"{kind.value} record needs {_REQUIRED_FIELDS[kind]} fields, got {len(parts)}",
        )

    status = parts[1].strip()
    if status not in (STATUS_DONE, STATUS_NOT_DONE):
        return err(ErrorKind.PARSE_ERROR, f"Unknown status {status!r}")

    match kind:
        case TaskKind.TODO:
            res = make_todo(RECORD_SEPARATOR.join(parts[2:]))
        case TaskKind.DEADLINE:
            res = make_deadline(RECORD_SEPARATOR.join(parts[2:-1]), parts[-1])
        case TaskKind.EVENT:
            res = make_event(RECORD_SEPARATOR.join(parts[2:-2]), parts[-2], parts[-1])

    if not isinstance(res, Ok):
        return err(ErrorKind.PARSE_ERROR, f"Bad {kind.value} record: {res.message}")

    task = res.value
    task.is_done = status == STATUS_DONE
    return Ok(task)

# src/harvest/tasks/task_errors.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Every failure the task subsystem reports as a value."""

    EMPTY_DESCRIPTION = "empty_description"
    INVALID_DATE_FORMAT = "invalid_date_format"
    INVALID_DEADLINE_FORMAT = "invalid_deadline_format"
    INVALID_TIME_FORMAT = "invalid_time_format"
    MISSING_TIME_FIELD = "missing_time_field"
    INVALID_TIME_ORDER = "invalid_time_order"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    DUPLICATE_TASK = "duplicate_task"
    NUMBER_FORMAT = "number_format"
    PAST_TIME = "past_time"
    PARSE_ERROR = "parse_error"
    IO_ERROR = "io_error"


@dataclass(frozen=True, slots=True)
class TaskError:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err:
    error: TaskError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message


Result = Union[Ok[T], Err]


def err(kind: ErrorKind, message: str) -> Err:
    """Shorthand for building an Err from its parts."""
    return Err(TaskError(kind, message))

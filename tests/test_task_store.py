# tests/test_task_store.py

from __future__ import annotations

from datetime import datetime

import pytest

from harvest.tasks.task_errors import Err, ErrorKind, Ok
from harvest.tasks.task_models import Task, TaskKind
from harvest.tasks.task_store import TaskStore


def test_add_and_list_keep_insertion_order(store: TaskStore) -> None:
    assert isinstance(store.add_todo("Buy milk"), Ok)
    assert isinstance(store.add_deadline("Pay rent", "2099-01-01 09:00"), Ok)
    assert isinstance(store.add_event("Trip", "2099-05-01 08:00", "2099-05-03 20:00"), Ok)

    kinds = [t.kind for t in store.all()]
    assert kinds == [TaskKind.TODO, TaskKind.DEADLINE, TaskKind.EVENT]
    assert len(store) == store.size() == 3
    assert isinstance(store.all(), tuple)


def test_add_deadline_validation(store: TaskStore) -> None:
    assert store.add_deadline("  ", "2099-01-01 09:00").kind is ErrorKind.EMPTY_DESCRIPTION
    assert store.add_deadline("Pay", "01/01/2099").kind is ErrorKind.INVALID_DEADLINE_FORMAT
    # Right shape, impossible date.
    assert store.add_deadline("Pay", "2099-13-01 09:00").kind is ErrorKind.INVALID_DATE_FORMAT
    assert store.size() == 0


def test_add_event_validation(store: TaskStore) -> None:
    assert store.add_event("", "2099-01-01 09:00", "2099-01-01 10:00").kind is (
        ErrorKind.EMPTY_DESCRIPTION
    )
    assert store.add_event("Trip", " ", "2099-01-01 10:00").kind is ErrorKind.MISSING_TIME_FIELD
    assert store.add_event("Trip", "2099-01-01 09:00", "soon").kind is (
        ErrorKind.INVALID_TIME_FORMAT
    )
    assert store.add_event("Trip", "2099-01-02 09:00", "2099-01-01 10:00").kind is (
        ErrorKind.INVALID_TIME_ORDER
    )
    assert store.size() == 0


def test_task_exists_is_case_insensitive_across_kinds(store: TaskStore) -> None:
    store.add_deadline("Pay Rent", "2099-01-01 09:00")
    assert store.task_exists("pay rent")
    assert store.task_exists("PAY RENT")
    assert not store.task_exists("pay")


@pytest.mark.parametrize("number", [0, -1, 2])
def test_out_of_range_numbers_leave_store_unchanged(store: TaskStore, number: int) -> None:
    store.add_todo("Only task")
    before = [t.to_display_string() for t in store.all()]

    for op in (store.mark_done, store.mark_not_done, store.delete):
        res = op(number)
        assert isinstance(res, Err)
        assert res.kind is ErrorKind.INDEX_OUT_OF_RANGE

    assert [t.to_display_string() for t in store.all()] == before


def test_mark_unmark_delete(store: TaskStore) -> None:
    store.add_todo("First")
    store.add_todo("Second")

    res = store.mark_done(2)
    assert isinstance(res, Ok)
    assert res.value.is_done

    assert store.mark_not_done(2) == Ok(Task("Second"))

    deleted = store.delete(1)
    assert isinstance(deleted, Ok)
    assert deleted.value.description == "First"
    assert [t.description for t in store.all()] == ["Second"]


def test_find_by_substring(store: TaskStore) -> None:
    store.add_todo("Read Book")
    store.add_todo("Buy milk")
    store.add_todo("return library book")

    found = store.find_by_substring("BOOK")
    assert [t.description for t in found] == ["Read Book", "return library book"]
    assert store.find_by_substring("xyz") == []


def test_check_event_clash_uses_half_open_intervals(store: TaskStore) -> None:
    store.add_event("Standup", "2099-01-01 09:00", "2099-01-01 10:00")
    store.add_event("Lunch", "2099-01-01 12:00", "2099-01-01 13:00")
    store.add_todo("Not an event")

    # Touching at the boundary is not a clash.
    assert store.check_event_clash(datetime(2099, 1, 1, 10, 0), datetime(2099, 1, 1, 11, 0)) is None

    warning = store.check_event_clash(datetime(2099, 1, 1, 9, 30), datetime(2099, 1, 1, 12, 30))
    assert warning is not None
    assert warning.splitlines() == [
        'Warning: The event "Standup" overlaps with the new event.',
        'Warning: The event "Lunch" overlaps with the new event.',
    ]


def test_store_rejects_absent_tasks(store: TaskStore) -> None:
    with pytest.raises(ValueError):
        store.add_task(None)  # type: ignore[arg-type]
    assert store.size() == 0

"""Tests for StatusTransitionHandler — isDone changes and date side effects."""

from datetime import datetime

import pytest

from tracker.engines.status import StatusTransitionHandler
from tracker.engines.store import TaskStore
from tracker.errors import InvalidArgument, NotFound


def _done_task(session):
    tasks = TaskStore(session)
    task = tasks.create(name="Deploy", start_date="2024-01-02", due_date="2024-01-05")
    return tasks.update(task.id, {"is_done": True, "done_date": "2024-01-04T16:00:00"})


def test_reset_clears_start_and_done_dates(session):
    task = _done_task(session)
    result = StatusTransitionHandler(session).set_task_status(task.id, False)
    assert result.is_done is False
    assert result.start_date is None
    assert result.done_date is None
    assert result.due_date == datetime(2024, 1, 5)


def test_mark_done_leaves_dates_unchanged(session):
    task = _done_task(session)
    result = StatusTransitionHandler(session).set_task_status(task.id, True)
    assert result.is_done is True
    assert result.start_date == datetime(2024, 1, 2)
    assert result.done_date == datetime(2024, 1, 4, 16)


def test_mark_done_does_not_stamp_done_date(session):
    task = TaskStore(session).create(name="Plan", start_date="2024-01-02", due_date="2024-01-05")
    result = StatusTransitionHandler(session).set_task_status(task.id, True)
    assert result.is_done is True
    assert result.done_date is None


def test_reset_is_persisted(session):
    task = _done_task(session)
    StatusTransitionHandler(session).set_task_status(task.id, False)
    session.expire_all()
    stored = TaskStore(session).get(task.id)
    assert stored.start_date is None
    assert stored.done_date is None


def test_dates_can_be_set_again_after_reset(session):
    task = _done_task(session)
    StatusTransitionHandler(session).set_task_status(task.id, False)
    updated = TaskStore(session).update(task.id, {"start_date": "2024-01-06"})
    assert updated.start_date == datetime(2024, 1, 6)


def test_unknown_task_raises_not_found(session):
    with pytest.raises(NotFound):
        StatusTransitionHandler(session).set_task_status("nonexistent-id", False)


def test_non_boolean_status_is_invalid(session):
    task = _done_task(session)
    with pytest.raises(InvalidArgument):
        StatusTransitionHandler(session).set_task_status(task.id, "false")

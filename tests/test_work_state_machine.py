"""Tests for work-state transitions and work time accumulation."""

from datetime import datetime, timedelta

import pytest

from worktrack.domain.entities.todo import Todo, TodoStatus, WorkState
from worktrack.domain.entities.todo_activity import ActivityType
from worktrack.domain.errors import InvalidStateTransitionError
from worktrack.domain.services.work_state_machine import (
    elapsed_seconds,
    format_work_time,
    record_activity,
    reopen,
)

T0 = datetime(2024, 1, 15, 9, 0, 0)


def make_todo(**kwargs):
    defaults = dict(id="t1", title="Write report", created_at=T0, updated_at=T0, last_state_change_at=T0)
    defaults.update(kwargs)
    return Todo(**defaults)


def at(seconds):
    return T0 + timedelta(seconds=seconds)


class TestStart:
    def test_start_from_idle(self):
        result = record_activity(make_todo(), ActivityType.STARTED, at(10))
        assert result.todo.work_state == WorkState.ACTIVE
        assert result.todo.last_state_change_at == at(10)
        assert result.activity.previous_state == WorkState.IDLE
        assert result.activity.work_time == 0

    def test_start_moves_pending_to_in_progress(self):
        result = record_activity(make_todo(), ActivityType.STARTED, at(0))
        assert result.todo.status == TodoStatus.IN_PROGRESS

    def test_resume_from_paused_keeps_total(self):
        todo = make_todo(work_state=WorkState.PAUSED, total_work_time=120, status=TodoStatus.IN_PROGRESS)
        result = record_activity(todo, ActivityType.STARTED, at(500))
        assert result.todo.work_state == WorkState.ACTIVE
        assert result.todo.total_work_time == 120

    def test_start_when_active_is_rejected(self):
        todo = make_todo(work_state=WorkState.ACTIVE)
        with pytest.raises(InvalidStateTransitionError, match="already active"):
            record_activity(todo, ActivityType.STARTED, at(5))

    def test_start_when_completed_is_rejected(self):
        todo = make_todo(work_state=WorkState.COMPLETED, status=TodoStatus.COMPLETED)
        with pytest.raises(InvalidStateTransitionError):
            record_activity(todo, ActivityType.STARTED, at(5))


class TestPause:
    def test_pause_books_elapsed_time(self):
        todo = make_todo(work_state=WorkState.ACTIVE, total_work_time=100)
        result = record_activity(todo, ActivityType.PAUSED, at(3600))
        assert result.todo.work_state == WorkState.PAUSED
        assert result.todo.total_work_time == 3700
        assert result.activity.work_time == 3600
        assert result.todo.last_state_change_at == at(3600)

    @pytest.mark.parametrize("state", [WorkState.IDLE, WorkState.PAUSED, WorkState.COMPLETED])
    def test_pause_when_not_active_is_rejected(self, state):
        todo = make_todo(work_state=state, total_work_time=42)
        with pytest.raises(InvalidStateTransitionError, match="Can only pause an active todo"):
            record_activity(todo, ActivityType.PAUSED, at(60))
        assert todo.total_work_time == 42
        assert todo.work_state == state

    def test_clock_going_backwards_books_nothing(self):
        todo = make_todo(work_state=WorkState.ACTIVE, last_state_change_at=at(100))
        result = record_activity(todo, ActivityType.PAUSED, at(50))
        assert result.activity.work_time == 0
        assert result.todo.total_work_time == 0


class TestComplete:
    def test_complete_from_active_books_time(self):
        todo = make_todo(work_state=WorkState.ACTIVE, total_work_time=60)
        result = record_activity(todo, ActivityType.COMPLETED, at(90))
        assert result.todo.work_state == WorkState.COMPLETED
        assert result.todo.status == TodoStatus.COMPLETED
        assert result.todo.total_work_time == 150
        assert result.activity.work_time == 90

    def test_complete_from_paused_books_nothing(self):
        todo = make_todo(work_state=WorkState.PAUSED, total_work_time=60, last_state_change_at=at(0))
        result = record_activity(todo, ActivityType.COMPLETED, at(1000))
        assert result.todo.total_work_time == 60
        assert result.activity.work_time == 0

    def test_complete_from_idle(self):
        result = record_activity(make_todo(), ActivityType.COMPLETED, at(10))
        assert result.todo.work_state == WorkState.COMPLETED
        assert result.todo.total_work_time == 0

    def test_complete_twice_is_rejected(self):
        todo = make_todo(work_state=WorkState.COMPLETED, status=TodoStatus.COMPLETED)
        with pytest.raises(InvalidStateTransitionError, match="already completed"):
            record_activity(todo, ActivityType.COMPLETED, at(10))


class TestDiscard:
    def test_discard_while_active_books_time_but_keeps_state(self):
        todo = make_todo(work_state=WorkState.ACTIVE, total_work_time=10)
        result = record_activity(todo, ActivityType.DISCARDED, at(20))
        assert result.todo.work_state == WorkState.ACTIVE
        assert result.todo.total_work_time == 30
        assert result.todo.last_state_change_at == T0
        assert result.activity.work_time == 20

    @pytest.mark.parametrize("state", [WorkState.IDLE, WorkState.PAUSED, WorkState.COMPLETED])
    def test_discard_elsewhere_is_a_plain_annotation(self, state):
        todo = make_todo(work_state=state, total_work_time=10)
        result = record_activity(todo, ActivityType.DISCARDED, at(20), note="not needed")
        assert result.todo.work_state == state
        assert result.todo.total_work_time == 10
        assert result.activity.work_time is None
        assert result.activity.note == "not needed"


class TestScenario:
    def test_start_pause_resume_pause(self):
        """One hour, a break, then half an hour: 3600 then 5400 seconds"""
        todo = make_todo()
        todo = record_activity(todo, ActivityType.STARTED, at(0)).todo
        todo = record_activity(todo, ActivityType.PAUSED, at(3600)).todo
        assert todo.total_work_time == 3600

        todo = record_activity(todo, ActivityType.STARTED, at(4000)).todo
        todo = record_activity(todo, ActivityType.PAUSED, at(5800)).todo
        assert todo.total_work_time == 5400
        assert todo.work_state == WorkState.PAUSED

    def test_inputs_are_not_mutated(self):
        todo = make_todo(work_state=WorkState.ACTIVE)
        record_activity(todo, ActivityType.PAUSED, at(60))
        assert todo.work_state == WorkState.ACTIVE
        assert todo.total_work_time == 0

    def test_total_never_decreases(self):
        todo = make_todo()
        totals = [todo.total_work_time]
        steps = [
            (ActivityType.STARTED, 0),
            (ActivityType.DISCARDED, 30),
            (ActivityType.PAUSED, 100),
            (ActivityType.STARTED, 200),
            (ActivityType.COMPLETED, 260),
        ]
        for activity_type, offset in steps:
            todo = record_activity(todo, activity_type, at(offset)).todo
            totals.append(todo.total_work_time)
        assert totals == sorted(totals)


class TestReopen:
    def test_reopen_completed(self):
        todo = make_todo(work_state=WorkState.COMPLETED, status=TodoStatus.COMPLETED, total_work_time=99)
        reopened = reopen(todo, at(5))
        assert reopened.status == TodoStatus.PENDING
        assert reopened.work_state == WorkState.IDLE
        assert reopened.total_work_time == 99

    def test_reopen_open_todo_is_rejected(self):
        with pytest.raises(InvalidStateTransitionError):
            reopen(make_todo(), at(5))


class TestHelpers:
    def test_elapsed_seconds_floors(self):
        assert elapsed_seconds(T0, T0 + timedelta(seconds=59, milliseconds=999)) == 59

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "0 seconds"),
            (1, "1 second"),
            (61, "1 minute, 1 second"),
            (9015, "2 hours, 30 minutes, 15 seconds"),
            (7200, "2 hours"),
        ],
    )
    def test_format_work_time(self, seconds, expected):
        assert format_work_time(seconds) == expected

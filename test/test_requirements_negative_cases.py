from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from study_planner.models import Preferences, Task, TimeConstraint

DUE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_task_invalid_duration():
    with pytest.raises(ValidationError):
        Task(id="a", title="Bad", due_at=DUE, est_hours=-5)


def test_task_zero_duration():
    with pytest.raises(ValidationError):
        Task(id="a", title="Bad", due_at=DUE, est_hours=0)


def test_task_empty_title():
    with pytest.raises(ValidationError):
        Task(id="a", title="   ", due_at=DUE, est_hours=1)


def test_task_difficulty_out_of_range():
    with pytest.raises(ValidationError):
        Task(id="a", title="X", due_at=DUE, est_hours=1, difficulty=6)


def test_task_unknown_type():
    with pytest.raises(ValidationError):
        Task(id="a", title="X", due_at=DUE, est_hours=1, type="lab")


def test_negative_break_length():
    with pytest.raises(ValidationError):
        Preferences(break_length_minutes=-1)


def test_unknown_weekday():
    with pytest.raises(ValidationError):
        Preferences(weekly_schedule={"funday": {}})


def test_constraint_day_out_of_range():
    with pytest.raises(ValidationError):
        TimeConstraint(start_time="10:00", end_time="11:00", days=[7])

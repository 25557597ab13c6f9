from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from study_planner.models import DaySchedule, Preferences, Task, WEEKDAYS

TZ_NAME = "Europe/Bratislava"
TZ = ZoneInfo(TZ_NAME)

# Monday, before the study day starts
NOW = datetime(2025, 6, 2, 8, 0, tzinfo=TZ)


def local(day_offset: int, hour: int, minute: int = 0) -> datetime:
    return (NOW + timedelta(days=day_offset)).replace(hour=hour, minute=minute)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_task():
    counter = {"n": 0}

    def _make(**kwargs):
        counter["n"] += 1
        data = {
            "id": f"t{counter['n']}",
            "title": f"Task {counter['n']}",
            "type": "reading",
            "due_at": NOW + timedelta(days=3),
            "est_hours": 1.0,
            "difficulty": 3,
            "priority": "medium",
        }
        data.update(kwargs)
        return Task(**data)

    return _make


@pytest.fixture
def make_prefs():
    def _make(start="09:00", end="17:00", days=WEEKDAYS, **kwargs):
        data = {
            "timezone": TZ_NAME,
            "block_length_minutes": 45,
            "break_length_minutes": 15,
            "weekly_schedule": {
                name: DaySchedule(start_time=start, end_time=end) for name in days
            },
        }
        data.update(kwargs)
        return Preferences(**data)

    return _make


def assert_no_overlap(sessions):
    ordered = sorted(sessions, key=lambda s: s.start_at)
    for a, b in zip(ordered, ordered[1:]):
        assert a.end_at <= b.start_at, f"{a.id} overlaps {b.id}"

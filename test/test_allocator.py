from datetime import timedelta

import pytest

from conftest import NOW, TZ, local

from study_planner.models import PlanSession
from scheduling.allocator import (
    allocate_task_sessions,
    max_sessions_per_day,
    optimal_session_length,
    reconcile_durations,
)
from scheduling.slots import generate_slots


def _sessions(*minutes):
    return [
        PlanSession(
            id=f"s-{i}",
            task_id="s",
            start_at=local(0, 9 + i),
            end_at=local(0, 9 + i) + timedelta(minutes=m),
        )
        for i, m in enumerate(minutes)
    ]


@pytest.mark.parametrize("task_type,difficulty,expected", [
    ("reading", 3, 45),
    ("reading", 1, 30),
    ("memorization", 2, 30),
    ("problem-set", 4, 75),
    ("essay", 5, 105),
    ("exam-prep", 3, 50),
    ("something-else", 3, 45),
])
def test_optimal_session_length(task_type, difficulty, expected):
    assert optimal_session_length(task_type, difficulty) == expected


@pytest.mark.parametrize("task_type,difficulty,expected", [
    ("reading", 3, 3),
    ("memorization", 4, 3),
    ("essay", 5, 1),
    ("exam-prep", 2, 1),
    ("something-else", 3, 2),
])
def test_max_sessions_per_day(task_type, difficulty, expected):
    assert max_sessions_per_day(task_type, difficulty) == expected


def test_reconcile_trims_from_the_end():
    sessions = _sessions(45, 45, 45)
    assert reconcile_durations(sessions, 100) == 0
    assert [s.duration_minutes for s in sessions] == [45, 40, 15]


def test_reconcile_extends_evenly_when_unbounded():
    sessions = _sessions(30, 30)
    assert reconcile_durations(sessions, 100) == 0
    assert [s.duration_minutes for s in sessions] == [50, 50]


def test_reconcile_respects_extension_limits():
    sessions = _sessions(45)
    limit = sessions[0].end_at + timedelta(minutes=10)
    assert reconcile_durations(sessions, 60, [limit]) == 5
    assert sessions[0].end_at == limit


def test_reconcile_keeps_minimum_length():
    sessions = _sessions(20, 20)
    assert reconcile_durations(sessions, 10) == -20
    assert [s.duration_minutes for s in sessions] == [15, 15]


def test_reconcile_noop_on_exact_sum():
    sessions = _sessions(45, 15)
    assert reconcile_durations(sessions, 60) == 0
    assert [s.duration_minutes for s in sessions] == [45, 15]


def test_allocates_best_slots_first(make_task, make_prefs):
    prefs = make_prefs()
    slots = generate_slots(NOW, prefs, days_ahead=7)
    task = make_task(est_hours=2)

    allocation = allocate_task_sessions(task, slots, prefs, TZ)

    assert [(s.start_at, s.end_at) for s in allocation.sessions] == [
        (local(0, 9), local(0, 9, 45)),
        (local(0, 10), local(0, 10, 45)),
        (local(0, 11), local(0, 11, 30)),
    ]
    assert allocation.scheduled_minutes == 120
    assert allocation.shortfall_minutes == 0
    assert [s.id for s in allocation.sessions] == [f"{task.id}-0", f"{task.id}-1", f"{task.id}-2"]
    assert all(s.method == "SQ3R Method" for s in allocation.sessions)
    assert allocation.sessions[0].tip.startswith("Session 1:")
    assert allocation.sessions[1].tip.startswith("Session 2:")
    # the shared slot list is only read
    assert len(slots) == 8 * 7


def test_daily_cap_spreads_sessions_across_days(make_task, make_prefs):
    prefs = make_prefs()
    slots = generate_slots(NOW, prefs, days_ahead=7)
    essay = make_task(type="essay", est_hours=3)

    allocation = allocate_task_sessions(essay, slots, prefs, TZ)

    days = [s.start_at.astimezone(TZ).date() for s in allocation.sessions]
    assert len(days) == len(set(days)) == 3
    # 3 x 45 min blocks stretched into their trailing breaks
    assert allocation.scheduled_minutes == 180
    assert [s.duration_minutes for s in allocation.sessions] == [60, 60, 60]


def test_sessions_never_start_after_due_date(make_task, make_prefs):
    prefs = make_prefs()
    slots = generate_slots(NOW, prefs, days_ahead=7)
    task = make_task(est_hours=2, due_at=local(0, 9, 30))

    allocation = allocate_task_sessions(task, slots, prefs, TZ)

    assert len(allocation.sessions) == 1
    assert all(s.start_at <= task.due_at for s in allocation.sessions)
    assert allocation.scheduled_minutes == 60
    assert allocation.shortfall_minutes == 60


def test_no_slots_before_due_gives_empty_allocation(make_task, make_prefs):
    prefs = make_prefs()
    slots = generate_slots(NOW, prefs, days_ahead=7)
    task = make_task(due_at=NOW + timedelta(minutes=30))

    allocation = allocate_task_sessions(task, slots, prefs, TZ)

    assert allocation.sessions == []
    assert allocation.shortfall_minutes == 60


def test_extensions_stay_inside_the_slot_headroom(make_task, make_prefs):
    prefs = make_prefs(days=("monday",), end="11:00")
    slots = generate_slots(NOW, prefs, days_ahead=1)
    task = make_task(est_hours=3)

    allocation = allocate_task_sessions(task, slots, prefs, TZ)
    by_start = {s.start_at: s for s in slots}

    assert allocation.scheduled_minutes == 120
    assert allocation.shortfall_minutes == 60
    for session in allocation.sessions:
        assert session.end_at <= by_start[session.start_at].extend_until


def test_short_tail_is_folded_into_earlier_session(make_task, make_prefs):
    prefs = make_prefs()
    slots = generate_slots(NOW, prefs, days_ahead=7)
    task = make_task(est_hours=0.8)

    allocation = allocate_task_sessions(task, slots, prefs, TZ)

    assert [s.duration_minutes for s in allocation.sessions] == [48]
    assert allocation.shortfall_minutes == 0

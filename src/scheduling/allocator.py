"""
Greedy per-task session allocation.

A task walks the shared candidate slots in priority order and takes sessions
until its estimated effort is covered, respecting its due date and a per-day
session cap. Afterwards the session lengths are reconciled so their sum is
exactly round(est_hours * 60) minutes whenever the slots allow it.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from study_planner.models import PlanSession, Preferences, Task
from scheduling.intervals import add_minutes, is_after, local_date, minutes_between
from scheduling.policy import DEFAULT_POLICY, SchedulingPolicy
from scheduling.slots import CandidateSlot
from scheduling.study_methods import session_tip, study_method

logger = logging.getLogger(__name__)

BASE_SESSION_LENGTHS = {
    "reading": 45,
    "memorization": 30,
    "problem-set": 60,
    "essay": 90,
    "exam-prep": 50,
}

BASE_SESSIONS_PER_DAY = {
    "memorization": 4,
    "essay": 1,
    "exam-prep": 1,
    "reading": 3,
    "problem-set": 3,
}


@dataclass
class Allocation:
    task: Task
    requested_minutes: int
    sessions: List[PlanSession] = field(default_factory=list)

    @property
    def scheduled_minutes(self) -> int:
        return sum(s.duration_minutes for s in self.sessions)

    @property
    def shortfall_minutes(self) -> int:
        return max(0, self.requested_minutes - self.scheduled_minutes)


def optimal_session_length(task_type: str, difficulty: int) -> int:
    length = BASE_SESSION_LENGTHS.get(task_type, 45)
    if difficulty >= 4:
        length = min(length + 15, 120)
    if difficulty <= 2:
        length = max(length - 15, 30)
    return length


def max_sessions_per_day(task_type: str, difficulty: int) -> int:
    sessions = BASE_SESSIONS_PER_DAY.get(task_type, 2)
    if difficulty >= 4:
        sessions = max(1, sessions - 1)
    return sessions


def reconcile_durations(
    sessions: List[PlanSession],
    total_minutes: int,
    extend_limits: Optional[Sequence[Optional[datetime]]] = None,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> int:
    """Stretch or trim `sessions` in place so they sum to `total_minutes`.

    Extensions never push a session past its entry in `extend_limits` (None
    means unbounded). Returns the minutes still missing (negative when the
    15-minute floor prevented trimming an excess).
    """
    if not sessions:
        return total_minutes

    limits = list(extend_limits) if extend_limits is not None else [None] * len(sessions)

    def headroom(i: int) -> float:
        if limits[i] is None:
            return math.inf
        return max(0, math.floor(minutes_between(sessions[i].end_at, limits[i])))

    def extend(i: int, minutes: int) -> None:
        sessions[i].end_at = add_minutes(sessions[i].end_at, minutes)

    missing = total_minutes - sum(s.duration_minutes for s in sessions)

    if missing > 0:
        for i in reversed(range(len(sessions))):
            if missing <= 0:
                break
            ext = int(min(missing, policy.max_extension_per_session_min, headroom(i)))
            if ext > 0:
                extend(i, ext)
                missing -= ext

        while missing > 0:
            growable = [i for i in range(len(sessions)) if headroom(i) >= 1]
            if not growable:
                break
            share = math.ceil(missing / len(growable))
            for i in growable:
                ext = int(min(share, missing, headroom(i)))
                if ext > 0:
                    extend(i, ext)
                    missing -= ext
                if missing <= 0:
                    break

    elif missing < 0:
        excess = -missing
        for i in reversed(range(len(sessions))):
            if excess <= 0:
                break
            cut = min(excess, max(0, sessions[i].duration_minutes - policy.min_session_minutes))
            if cut > 0:
                extend(i, -cut)
                excess -= cut
        missing = -excess

    return missing


def allocate_task_sessions(
    task: Task,
    slots: Sequence[CandidateSlot],
    preferences: Preferences,
    tz: tzinfo,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> Allocation:
    """Place sessions for one task. `slots` is read, never modified."""
    total_minutes = round(task.est_hours * 60)
    allocation = Allocation(task=task, requested_minutes=total_minutes)

    session_length = optimal_session_length(task.type, task.difficulty)
    daily_cap = max_sessions_per_day(task.type, task.difficulty)
    block = preferences.block_length_minutes

    remaining = total_minutes
    per_day: Counter = Counter()
    limits: List[datetime] = []

    for slot in slots:
        if remaining <= 0:
            break
        # a tail below the session floor is absorbed by reconciliation instead
        if allocation.sessions and remaining < policy.min_session_minutes:
            break
        if is_after(slot.start_at, task.due_at):
            continue

        day = local_date(slot.start_at, tz)
        if per_day[day] >= daily_cap:
            continue

        length = min(session_length, remaining, block)
        end_at = add_minutes(slot.start_at, length)
        if end_at > slot.end_at:
            continue

        number = len(allocation.sessions) + 1
        allocation.sessions.append(
            PlanSession(
                id=f"{task.id}-{number - 1}",
                task_id=task.id,
                start_at=slot.start_at,
                end_at=end_at,
                type="task",
                method=study_method(task.type),
                tip=session_tip(task.type, number, task.difficulty),
            )
        )
        limits.append(slot.extend_until)
        remaining -= length
        per_day[day] += 1

    if allocation.sessions:
        missing = reconcile_durations(allocation.sessions, total_minutes, limits, policy)
        if missing > 0:
            logger.info(
                "Task %s: %d of %d minutes could not be placed",
                task.id,
                missing,
                total_minutes,
            )
    return allocation

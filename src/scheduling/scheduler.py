"""
Scheduler - entry point of the scheduling engine.

Pipeline per run: generate candidate slots -> order open tasks -> allocate
sessions task by task from a shared slot pool -> insert breaks (or merge
sessions) -> compute coverage, conflicts and suggestions.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from study_planner.models import PlanSession, Preferences, ScheduleResult, Task
from scheduling.allocator import Allocation, allocate_task_sessions
from scheduling.diagnostics import (
    build_suggestions,
    compute_coverage,
    conflict_messages,
    requested_minutes,
    scheduled_task_minutes,
)
from scheduling.intervals import resolve_timezone, to_utc
from scheduling.policy import DEFAULT_POLICY, SchedulingPolicy
from scheduling.postprocess import finalize_sessions
from scheduling.prioritizer import prioritize_tasks
from scheduling.slots import SlotPool, generate_slots

logger = logging.getLogger(__name__)


class Scheduler:
    """Deterministic study-session scheduler. Holds configuration only, no run state."""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or DEFAULT_POLICY

    def schedule(
        self,
        tasks: Sequence[Task],
        preferences: Preferences,
        days_ahead: int = 7,
        now: Optional[datetime] = None,
    ) -> ScheduleResult:
        tz = resolve_timezone(preferences.timezone)
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=tz)
        now = to_utc(now)

        open_tasks = [t for t in tasks if t.status == "open"]
        if not open_tasks:
            return ScheduleResult(suggestions=build_suggestions(tasks, [], 100.0, 0, now, self.policy))

        pool = SlotPool(generate_slots(now, preferences, days_ahead, tz=tz, policy=self.policy))
        logger.info(
            "Scheduling %d open task(s) over %d day(s) with %d candidate slot(s)",
            len(open_tasks),
            days_ahead,
            len(pool),
        )

        allocations: List[Allocation] = []
        placed: List[PlanSession] = []
        for task in prioritize_tasks(open_tasks, now, self.policy):
            allocation = allocate_task_sessions(task, pool.slots, preferences, tz, self.policy)
            allocations.append(allocation)
            if not allocation.sessions:
                logger.debug("Task %s received no sessions", task.id)
                continue
            placed.extend(allocation.sessions)
            pool.consume(allocation.sessions)

        scheduled = scheduled_task_minutes(placed)
        coverage = compute_coverage(scheduled, requested_minutes(open_tasks))

        result = ScheduleResult(
            sessions=finalize_sessions(placed, preferences, self.policy),
            conflicts=conflict_messages(allocations, tz),
            suggestions=build_suggestions(open_tasks, placed, coverage, len(pool), now, self.policy),
            total_planned_hours=scheduled / 60,
            coverage=coverage,
        )
        logger.info(
            "Planned %d session(s), %.2fh, coverage %.0f%%, %d conflict(s)",
            len(result.sessions),
            result.total_planned_hours,
            result.coverage,
            len(result.conflicts),
        )
        return result


def schedule(
    tasks: Sequence[Task],
    preferences: Preferences,
    days_ahead: int = 7,
    now: Optional[datetime] = None,
    policy: Optional[SchedulingPolicy] = None,
) -> ScheduleResult:
    return Scheduler(policy).schedule(tasks, preferences, days_ahead=days_ahead, now=now)

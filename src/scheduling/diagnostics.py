"""Coverage, conflict and suggestion messages for a scheduling run."""
from __future__ import annotations

from datetime import datetime, tzinfo
from typing import List, Sequence

from study_planner.models import PlanSession, Task
from scheduling.allocator import Allocation
from scheduling.intervals import format_in_timezone, to_utc
from scheduling.policy import DEFAULT_POLICY, SchedulingPolicy

NO_TASKS_MESSAGE = "Add some tasks to get started with your personalized study plan!"
NOTHING_SCHEDULED_MESSAGE = (
    "No study sessions could be scheduled. "
    "Consider extending your available hours or adjusting task deadlines."
)
HARD_TASKS_MESSAGE = (
    "You have many high-difficulty tasks. Schedule these during your peak focus hours."
)
UNUSED_TIME_MESSAGE = (
    "You have additional study time available. "
    "Consider adding more tasks or breaking large tasks into smaller ones."
)


def requested_minutes(tasks: Sequence[Task]) -> int:
    return sum(round(t.est_hours * 60) for t in tasks if t.status == "open")


def scheduled_task_minutes(sessions: Sequence[PlanSession]) -> int:
    return sum(s.duration_minutes for s in sessions if s.type == "task")


def compute_coverage(scheduled_minutes: float, total_minutes: float) -> float:
    if total_minutes <= 0:
        return 100.0
    return scheduled_minutes / total_minutes * 100


def conflict_messages(allocations: Sequence[Allocation], tz: tzinfo) -> List[str]:
    conflicts: List[str] = []
    for allocation in allocations:
        if allocation.requested_minutes <= 0:
            continue
        task = allocation.task
        due = format_in_timezone(task.due_at, tz)
        if not allocation.sessions:
            conflicts.append(f'Cannot schedule "{task.title}" before {due} - not enough available time')
        elif allocation.shortfall_minutes > 0:
            conflicts.append(
                f"Only scheduled {allocation.scheduled_minutes} of {allocation.requested_minutes} "
                f'minutes for "{task.title}" before {due}'
            )
    return conflicts


def build_suggestions(
    tasks: Sequence[Task],
    sessions: Sequence[PlanSession],
    coverage: float,
    unused_slots: int,
    now: datetime,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> List[str]:
    open_tasks = [t for t in tasks if t.status == "open"]
    task_sessions = [s for s in sessions if s.type == "task"]

    if not open_tasks:
        return [NO_TASKS_MESSAGE]
    if not task_sessions:
        return [NOTHING_SCHEDULED_MESSAGE]

    suggestions: List[str] = []

    urgent = [
        t for t in open_tasks
        if (to_utc(t.due_at) - to_utc(now)).total_seconds() / 86400 <= policy.urgent_within_days
    ]
    if urgent:
        suggestions.append(
            f"{len(urgent)} task(s) due within {policy.urgent_within_days:g} days - prioritize these immediately!"
        )

    if coverage < policy.low_coverage_pct:
        suggestions.append(
            f"Only {coverage:.0f}% of study time scheduled. "
            "Consider extending available hours or reducing task scope."
        )

    hard = [t for t in open_tasks if t.difficulty >= policy.hard_difficulty]
    if len(hard) > policy.max_hard_tasks:
        suggestions.append(HARD_TASKS_MESSAGE)

    if unused_slots > len(task_sessions) * policy.unused_slot_ratio:
        suggestions.append(UNUSED_TIME_MESSAGE)

    return suggestions

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, List, Tuple

from study_planner.models import Task
from scheduling.intervals import to_utc
from scheduling.policy import DEFAULT_POLICY, SchedulingPolicy


def days_until_due(task: Task, now: datetime, policy: SchedulingPolicy = DEFAULT_POLICY) -> float:
    """Days from `now` to the due date, floored so overdue tasks stay finite."""
    days = (to_utc(task.due_at) - to_utc(now)).total_seconds() / 86400
    return max(policy.min_days_until_due, days)


def urgency(task: Task, now: datetime, policy: SchedulingPolicy = DEFAULT_POLICY) -> float:
    return 1 / days_until_due(task, now, policy)


def complexity(task: Task, policy: SchedulingPolicy = DEFAULT_POLICY) -> float:
    return policy.complexity(task.type) * (1 + (task.difficulty - 3) * policy.difficulty_factor)


def priority_key(task: Task, now: datetime, policy: SchedulingPolicy = DEFAULT_POLICY) -> Tuple:
    # urgency is compared in threshold-wide buckets: smaller differences fall
    # through to complexity while the ordering stays total
    urgency_bucket = math.floor(urgency(task, now, policy) / policy.urgency_threshold)
    return (
        -policy.priority_weight(task.priority),
        -urgency_bucket,
        -complexity(task, policy),
        to_utc(task.due_at),
    )


def prioritize_tasks(
    tasks: Iterable[Task],
    now: datetime,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> List[Task]:
    """Open tasks, most important first. Equal keys keep their input order."""
    open_tasks = [t for t in tasks if t.status == "open"]
    return sorted(open_tasks, key=lambda t: priority_key(t, now, policy))

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, List, Sequence

from study_planner.models import PlanSession, Preferences
from scheduling.intervals import add_minutes, minutes_between
from scheduling.policy import DEFAULT_POLICY, SchedulingPolicy
from scheduling.study_methods import break_tip


def _timeline_order(sessions: Sequence[PlanSession]) -> List[PlanSession]:
    return sorted(sessions, key=lambda s: (s.start_at, s.id))


def merge_adjacent_sessions(
    sessions: Sequence[PlanSession],
    tolerance_min: float = DEFAULT_POLICY.merge_tolerance_min,
) -> List[PlanSession]:
    """Fuse back-to-back sessions of the same task into one block."""
    by_task: Dict[str, List[PlanSession]] = OrderedDict()
    others: List[PlanSession] = []
    for session in _timeline_order(sessions):
        if session.type == "task":
            by_task.setdefault(session.task_id, []).append(session)
        else:
            others.append(session)

    merged: List[PlanSession] = []
    for task_id, task_sessions in by_task.items():
        current = task_sessions[0].model_copy()
        for nxt in task_sessions[1:]:
            if minutes_between(current.end_at, nxt.start_at) <= tolerance_min:
                current = current.model_copy(
                    update={"end_at": nxt.end_at, "id": f"{task_id}-merged-{len(merged)}"}
                )
            else:
                merged.append(current)
                current = nxt.model_copy()
        merged.append(current)

    return _timeline_order(merged + others)


def insert_breaks(
    sessions: Sequence[PlanSession],
    break_length_min: int,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> List[PlanSession]:
    """Fill natural gaps between sessions with break blocks."""
    ordered = _timeline_order(sessions)
    blocks: List[PlanSession] = []

    for i, current in enumerate(ordered):
        blocks.append(current)
        if i == len(ordered) - 1:
            break

        gap = minutes_between(current.end_at, ordered[i + 1].start_at)
        if not (break_length_min <= gap <= policy.max_break_gap_min):
            continue

        long_break = gap >= policy.long_break_gap_min
        blocks.append(
            PlanSession(
                id=f"break-{i}",
                task_id="",
                start_at=current.end_at,
                end_at=add_minutes(current.end_at, min(gap, break_length_min)),
                type="break",
                label="Long Break" if long_break else "Break",
                tip=break_tip(long_break, i),
            )
        )

    return _timeline_order(blocks)


def finalize_sessions(
    sessions: Sequence[PlanSession],
    preferences: Preferences,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> List[PlanSession]:
    if preferences.break_length_minutes == 0:
        return merge_adjacent_sessions(sessions, policy.merge_tolerance_min)
    return insert_breaks(sessions, preferences.break_length_minutes, policy)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class SchedulingPolicy:
    """Heuristic constants of the scheduling engine.

    None of these are contracts; they are defaults that can be tuned per deployment.
    Slot boosts must stay monotonic in how well a slot matches stated preferences.
    """

    # slot scoring
    base_slot_priority: float = 1.0
    optimal_time_boost: float = 3.0
    morning_peak_boost: float = 2.0
    afternoon_peak_boost: float = 1.0
    morning_window: Tuple[int, int] = (6, 12)
    afternoon_window: Tuple[int, int] = (12, 18)
    evening_window: Tuple[int, int] = (18, 22)
    morning_peak_hours: Tuple[int, int] = (9, 11)  # inclusive
    afternoon_peak_hours: Tuple[int, int] = (14, 16)  # inclusive

    # task ordering
    priority_weights: Dict[str, float] = field(
        default_factory=lambda: {"low": 1.0, "medium": 5.0, "high": 15.0}
    )
    type_complexity: Dict[str, float] = field(
        default_factory=lambda: {
            "reading": 1.0,
            "memorization": 1.1,
            "problem-set": 1.3,
            "essay": 1.5,
            "exam-prep": 1.6,
        }
    )
    difficulty_factor: float = 0.2
    min_days_until_due: float = 0.1
    urgency_threshold: float = 0.1

    # allocation
    max_extension_per_session_min: int = 15
    min_session_minutes: int = 15

    # post-processing
    max_break_gap_min: int = 90
    long_break_gap_min: int = 60
    merge_tolerance_min: float = 1.0

    # diagnostics
    urgent_within_days: float = 2.0
    low_coverage_pct: float = 80.0
    hard_difficulty: int = 4
    max_hard_tasks: int = 3
    unused_slot_ratio: float = 1.5

    def priority_weight(self, priority: str) -> float:
        return self.priority_weights.get(priority, self.priority_weights["low"])

    def complexity(self, task_type: str) -> float:
        return self.type_complexity.get(task_type, 1.0)


DEFAULT_POLICY = SchedulingPolicy()

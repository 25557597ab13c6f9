import os
from dataclasses import replace
from typing import Optional

from scheduling.policy import DEFAULT_POLICY, SchedulingPolicy
from scheduling.scheduler import Scheduler

# Configuration
DEFAULT_DAYS_AHEAD = int(os.getenv("PLANNER_DAYS_AHEAD", "7"))
DEFAULT_TIMEZONE: Optional[str] = os.getenv("PLANNER_DEFAULT_TIMEZONE", "").strip() or None
MAX_BREAK_GAP_MIN = int(os.getenv("PLANNER_MAX_BREAK_GAP_MIN", str(DEFAULT_POLICY.max_break_gap_min)))
LOW_COVERAGE_PCT = float(os.getenv("PLANNER_LOW_COVERAGE_PCT", str(DEFAULT_POLICY.low_coverage_pct)))

policy: SchedulingPolicy = replace(
    DEFAULT_POLICY,
    max_break_gap_min=MAX_BREAK_GAP_MIN,
    low_coverage_pct=LOW_COVERAGE_PCT,
)

scheduler = Scheduler(policy)


def get_scheduler() -> Scheduler:
    return scheduler


def get_default_timezone() -> Optional[str]:
    return DEFAULT_TIMEZONE

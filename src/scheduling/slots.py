"""
Availability slot generation.

Expands the weekly schedule (or explicit time blocks) into fixed-length
candidate slots over a rolling horizon, drops slots that collide with meal
breaks or time constraints, and scores the rest by how well they match the
user's preferred study times.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Optional, Sequence, Tuple

from study_planner.models import PlanSession, Preferences, TimeConstraint
from scheduling.intervals import (
    InvalidTimeError,
    add_minutes,
    at_local_time,
    js_weekday,
    local_date,
    local_hour,
    overlaps,
    resolve_timezone,
    to_utc,
    weekday_name,
)
from scheduling.policy import DEFAULT_POLICY, SchedulingPolicy

logger = logging.getLogger(__name__)

Interval = Tuple[datetime, datetime]


@dataclass(frozen=True)
class CandidateSlot:
    start_at: datetime
    end_at: datetime
    priority: float
    # latest instant a session in this slot may grow to without touching
    # the next slot, the end of its window, or an exclusion
    extend_until: datetime


class SlotPool:
    """Candidate slots owned by one scheduling run; consumed as tasks are allocated."""

    def __init__(self, slots: Iterable[CandidateSlot]):
        self._slots: List[CandidateSlot] = list(slots)

    @property
    def slots(self) -> Tuple[CandidateSlot, ...]:
        return tuple(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def consume(self, sessions: Iterable[PlanSession]) -> int:
        """Remove the slot starting at each session's start. Returns how many were removed."""
        removed = 0
        for session in sessions:
            for idx, slot in enumerate(self._slots):
                if slot.start_at == session.start_at:
                    del self._slots[idx]
                    removed += 1
                    break
        return removed


def slot_priority(
    start_at: datetime,
    preferences: Preferences,
    tz: tzinfo,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> float:
    hour = local_hour(start_at, tz)
    optimal = preferences.optimal_study_times
    priority = policy.base_slot_priority

    for enabled, (lo, hi) in (
        (optimal.morning, policy.morning_window),
        (optimal.afternoon, policy.afternoon_window),
        (optimal.evening, policy.evening_window),
    ):
        if enabled and lo <= hour < hi:
            priority += policy.optimal_time_boost

    lo, hi = policy.morning_peak_hours
    if lo <= hour <= hi:
        priority += policy.morning_peak_boost
    lo, hi = policy.afternoon_peak_hours
    if lo <= hour <= hi:
        priority += policy.afternoon_peak_boost

    return priority


def _local_interval(day: date, start: str, end: str, tz: tzinfo, overnight: bool = False) -> Optional[Interval]:
    start_at = at_local_time(day, start, tz)
    end_at = at_local_time(day, end, tz)
    if end_at <= start_at:
        if not overnight:
            return None
        end_at = at_local_time(day + timedelta(days=1), end, tz)
    return start_at, end_at


def base_windows(day: date, preferences: Preferences, tz: tzinfo) -> List[Interval]:
    """Availability windows for one calendar day."""
    windows: List[Interval] = []

    if preferences.available_time_blocks:
        for block in preferences.available_time_blocks:
            try:
                interval = _local_interval(day, block.start_time, block.end_time, tz)
            except InvalidTimeError as e:
                logger.warning("Skipping time block %s-%s: %s", block.start_time, block.end_time, e)
                continue
            if interval:
                windows.append(interval)
        return windows

    day_schedule = preferences.weekly_schedule.get(weekday_name(day))
    if day_schedule is None or not day_schedule.is_available:
        return windows

    try:
        interval = _local_interval(day, day_schedule.start_time, day_schedule.end_time, tz)
    except InvalidTimeError as e:
        logger.warning("Skipping %s %s: %s", weekday_name(day), day.isoformat(), e)
        return windows
    if interval:
        windows.append(interval)
    return windows


def _constraint_applies(constraint: TimeConstraint, day: date) -> bool:
    if constraint.is_recurring:
        return js_weekday(day) in constraint.days
    return constraint.specific_date is not None and constraint.specific_date == day


def exclusions_for_day(day: date, preferences: Preferences, tz: tzinfo) -> List[Interval]:
    """Meal breaks and applicable constraints touching `day`, as UTC intervals."""
    excluded: List[Interval] = []

    day_schedule = preferences.weekly_schedule.get(weekday_name(day))
    if day_schedule is not None:
        for meal in day_schedule.meal_breaks:
            try:
                interval = _local_interval(day, meal.start, meal.end, tz)
            except InvalidTimeError as e:
                logger.warning("Ignoring meal break %r: %s", meal.label, e)
                continue
            if interval:
                excluded.append(interval)

    for constraint in preferences.constraints:
        # overnight constraints (e.g. sleep 23:00-07:00) spill from the previous day
        for anchor in (day - timedelta(days=1), day):
            if not _constraint_applies(constraint, anchor):
                continue
            try:
                interval = _local_interval(anchor, constraint.start_time, constraint.end_time, tz, overnight=True)
            except InvalidTimeError as e:
                if anchor == day:
                    logger.warning("Ignoring %s constraint %s: %s", constraint.type, constraint.id or "-", e)
                continue
            if interval:
                excluded.append(interval)

    return excluded


def _extension_limit(slot_end: datetime, limit: datetime, excluded: Sequence[Interval]) -> datetime:
    for ex_start, _ in excluded:
        if slot_end <= ex_start < limit:
            limit = ex_start
    return limit


def _slots_for_day(
    day: date,
    now: datetime,
    preferences: Preferences,
    tz: tzinfo,
    policy: SchedulingPolicy,
) -> List[CandidateSlot]:
    windows = base_windows(day, preferences, tz)
    if not windows:
        return []

    excluded = exclusions_for_day(day, preferences, tz)
    block = preferences.block_length_minutes
    step = block + preferences.break_length_minutes

    day_slots: List[CandidateSlot] = []
    for window_start, window_end in windows:
        current = window_start
        while add_minutes(current, block) <= window_end:
            slot_end = add_minutes(current, block)
            if (
                current >= now
                and not any(overlaps(current, slot_end, s, e) for s, e in excluded)
                # overlapping explicit blocks must not yield overlapping slots
                and not any(overlaps(current, slot_end, o.start_at, o.end_at) for o in day_slots)
            ):
                limit = min(add_minutes(current, step), window_end)
                day_slots.append(
                    CandidateSlot(
                        start_at=current,
                        end_at=slot_end,
                        priority=slot_priority(current, preferences, tz, policy),
                        extend_until=_extension_limit(slot_end, limit, excluded),
                    )
                )
            current = add_minutes(current, step)

    day_slots.sort(key=lambda s: s.start_at)
    for idx in range(len(day_slots) - 1):
        nxt = day_slots[idx + 1]
        if nxt.start_at < day_slots[idx].extend_until:
            day_slots[idx] = replace(day_slots[idx], extend_until=nxt.start_at)
    return day_slots


def generate_slots(
    now: datetime,
    preferences: Preferences,
    days_ahead: int = 7,
    tz: Optional[tzinfo] = None,
    policy: SchedulingPolicy = DEFAULT_POLICY,
) -> List[CandidateSlot]:
    """Return all candidate slots in the horizon, best-scored first (ties: earliest first)."""
    tz = tz or resolve_timezone(preferences.timezone)
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    now = to_utc(now)
    first_day = local_date(now, tz)

    slots: List[CandidateSlot] = []
    for offset in range(max(days_ahead, 0)):
        slots.extend(_slots_for_day(first_day + timedelta(days=offset), now, preferences, tz, policy))

    slots.sort(key=lambda s: (-s.priority, s.start_at))
    logger.debug("Generated %d candidate slots over %d day(s)", len(slots), days_ahead)
    return slots

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


TaskType = Literal["reading", "problem-set", "essay", "exam-prep", "memorization"]
TaskPriority = Literal["low", "medium", "high"]
TaskStatus = Literal["open", "done"]

SessionType = Literal["task", "break", "meal", "sleep", "unavailable"]
SessionStatus = Literal["planned", "done", "snoozed"]

ConstraintType = Literal["sleep", "meal", "work", "class", "personal", "unavailable"]

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Task(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    type: TaskType = "reading"

    due_at: datetime
    est_hours: float = Field(..., gt=0)

    difficulty: int = Field(3, ge=1, le=5)
    priority: TaskPriority = "medium"
    status: TaskStatus = "open"

    course_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("due_at")
    @classmethod
    def due_at_aware(cls, v: datetime) -> datetime:
        # naive due dates come from clients that already speak UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class MealBreak(BaseModel):
    """Recurring sub-interval of a weekday, e.g. {"start":"12:00","end":"13:00","label":"Lunch"}."""

    start: str
    end: str
    label: str = "Meal"


class DaySchedule(BaseModel):
    is_available: bool = True
    start_time: str = "09:00"
    end_time: str = "18:00"
    meal_breaks: List[MealBreak] = Field(default_factory=list)


class TimeBlock(BaseModel):
    start_time: str
    end_time: str


class TimeConstraint(BaseModel):
    """
    Ad-hoc exclusion window.

    Recurring constraints apply on `days` (0=Sunday .. 6=Saturday); one-time
    constraints apply on `specific_date` only.
    """

    id: Optional[str] = None
    type: ConstraintType = "unavailable"
    label: Optional[str] = None

    start_time: str
    end_time: str

    is_recurring: bool = True
    days: List[int] = Field(default_factory=list)
    specific_date: Optional[date] = None

    @field_validator("days")
    @classmethod
    def days_in_range(cls, v: List[int]) -> List[int]:
        for d in v:
            if d < 0 or d > 6:
                raise ValueError("days must be between 0 (Sunday) and 6 (Saturday)")
        return v


class OptimalStudyTimes(BaseModel):
    morning: bool = True  # 06-12
    afternoon: bool = True  # 12-18
    evening: bool = False  # 18-22


class Preferences(BaseModel):
    # None means "use the host timezone"
    timezone: Optional[str] = None

    block_length_minutes: int = Field(45, gt=0)
    # 0 disables breaks and merges adjacent sessions instead
    break_length_minutes: int = Field(15, ge=0)

    optimal_study_times: OptimalStudyTimes = Field(default_factory=OptimalStudyTimes)
    weekly_schedule: Dict[str, DaySchedule] = Field(default_factory=dict)

    # when non-empty, replaces the weekly table for every day
    available_time_blocks: List[TimeBlock] = Field(default_factory=list)
    constraints: List[TimeConstraint] = Field(default_factory=list)

    @field_validator("weekly_schedule")
    @classmethod
    def weekday_keys(cls, v: Dict[str, DaySchedule]) -> Dict[str, DaySchedule]:
        normalized = {}
        for key, day in v.items():
            name = key.strip().lower()
            if name not in WEEKDAYS:
                raise ValueError(f"unknown weekday: {key}")
            normalized[name] = day
        return normalized


class PlanSession(BaseModel):
    id: str
    task_id: str = ""
    start_at: datetime
    end_at: datetime

    type: SessionType = "task"
    status: SessionStatus = "planned"
    label: Optional[str] = None

    method: Optional[str] = None
    tip: Optional[str] = None

    @property
    def duration_minutes(self) -> int:
        return round((self.end_at - self.start_at).total_seconds() / 60)


class ScheduleResult(BaseModel):
    sessions: List[PlanSession] = Field(default_factory=list)
    conflicts: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    total_planned_hours: float = 0.0
    coverage: float = 100.0


def default_preferences(timezone: Optional[str] = None) -> Preferences:
    """Preferences handed to new users before they customise anything."""
    weekday = DaySchedule(
        start_time="09:00",
        end_time="18:00",
        meal_breaks=[MealBreak(start="12:00", end="13:00", label="Lunch")],
    )
    weekend = DaySchedule(
        start_time="10:00",
        end_time="16:00",
        meal_breaks=[MealBreak(start="13:00", end="14:00", label="Lunch")],
    )
    schedule = {name: weekday.model_copy(deep=True) for name in WEEKDAYS[:5]}
    schedule["saturday"] = weekend.model_copy(deep=True)
    schedule["sunday"] = weekend.model_copy(update={"is_available": False}, deep=True)

    return Preferences(
        timezone=timezone,
        block_length_minutes=45,
        break_length_minutes=15,
        optimal_study_times=OptimalStudyTimes(morning=True, afternoon=True, evening=False),
        weekly_schedule=schedule,
    )

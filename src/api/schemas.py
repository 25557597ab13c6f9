from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from api.dependencies import DEFAULT_DAYS_AHEAD
from study_planner.models import Preferences, Task, default_preferences


class ScheduleRequest(BaseModel):
    tasks: List[Task] = Field(default_factory=list)
    preferences: Preferences = Field(default_factory=default_preferences)
    days_ahead: int = Field(DEFAULT_DAYS_AHEAD, ge=1, le=60)
    # pinned "now" for reproducible plans; defaults to the request time
    now: Optional[datetime] = None

import asyncio
import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_default_timezone, get_scheduler
from api.metrics import (
    CONFLICTS_TOTAL,
    LAST_COVERAGE_PCT,
    REQUESTS_TOTAL,
    SCHEDULE_LATENCY_SECONDS,
    SESSIONS_PLANNED_TOTAL,
)
from api.schemas import ScheduleRequest
from scheduling.scheduler import Scheduler
from study_planner.models import Preferences, ScheduleResult, default_preferences

router = APIRouter()
logger = logging.getLogger(__name__)


def _record_metrics(result: ScheduleResult, elapsed_s: float) -> None:
    SCHEDULE_LATENCY_SECONDS.observe(elapsed_s)
    for session in result.sessions:
        SESSIONS_PLANNED_TOTAL.labels(type=session.type).inc()
    CONFLICTS_TOTAL.inc(len(result.conflicts))
    LAST_COVERAGE_PCT.set(result.coverage)


@router.post("/schedule", response_model=ScheduleResult)
async def create_schedule(
    payload: ScheduleRequest,
    scheduler: Scheduler = Depends(get_scheduler),
    default_timezone: Optional[str] = Depends(get_default_timezone),
) -> ScheduleResult:
    preferences = payload.preferences
    if not preferences.timezone and default_timezone:
        preferences = preferences.model_copy(update={"timezone": default_timezone})

    logger.info(f"Scheduling {len(payload.tasks)} task(s) for {payload.days_ahead} day(s)")
    start = time.perf_counter()
    try:
        result = await asyncio.to_thread(
            scheduler.schedule,
            payload.tasks,
            preferences,
            payload.days_ahead,
            payload.now,
        )
    except Exception as e:
        REQUESTS_TOTAL.labels(endpoint="/schedule", status="error").inc()
        logger.error(f"Scheduling failed: {e}")
        raise

    _record_metrics(result, time.perf_counter() - start)
    REQUESTS_TOTAL.labels(endpoint="/schedule", status="ok").inc()
    return result


@router.get("/preferences/default", response_model=Preferences)
async def get_default_preferences(
    timezone: Optional[str] = None,
    default_timezone: Optional[str] = Depends(get_default_timezone),
) -> Preferences:
    return default_preferences(timezone or default_timezone)

import logging
import os

from fastapi import FastAPI

from api.routers import ops, schedule

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)

app = FastAPI(title="Study Planner")

app.include_router(ops.router)
app.include_router(schedule.router)

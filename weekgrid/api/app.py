"""FastAPI web application for weekgrid."""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from weekgrid.database.database import get_db, init_db
from weekgrid.database.schedule_repository import ScheduleRepository
from weekgrid.engine.block_off import SCHEDULE_NOT_FOUND, block_off_time
from weekgrid.engine.generate import GenerateSchedule
from weekgrid.engine.regenerate import LockAndRegenerate
from weekgrid.engine.solver import ConstraintSolver
from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.constants import DEFAULT_SCHEDULE_TYPE
from weekgrid.models.proposed_event import ProposedEvent
from weekgrid.models.schedule import ScheduleSnapshot
from weekgrid.models.time_key import require_naive

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database schema ready")
    yield


# Initialize FastAPI app
app = FastAPI(
    title="weekgrid API",
    description="Places weekly activities on a 7x24 grid around locked events and blocked time",
    version="0.1.0",
    lifespan=lifespan,
)


def get_schedule_store(db: Session = Depends(get_db)) -> ScheduleRepository:
    return ScheduleRepository(db)


# Request/response models
class GenerateRequest(BaseModel):
    """Request to place proposed and fixed activities."""
    proposed_events: List[ProposedEvent] = Field(default_factory=list)
    fixed_activities: str = Field("", description="One 'Mon 09:00-10:00 Gym' style line per fixed activity")
    schedule_type: str = Field(DEFAULT_SCHEDULE_TYPE, description="'day' or 'week'")
    week_start: Optional[date] = Field(None, description="Monday anchoring block datetimes")


class GenerateResponse(BaseModel):
    schedule: Optional[ScheduleSnapshot]
    message: Optional[str] = None


class LockRequest(BaseModel):
    """Keys to pin (and optionally release) before regenerating."""
    locked_keys: List[str] = Field(default_factory=list, description="Time keys such as 'Mon 09:00'")
    unlocked_keys: List[str] = Field(default_factory=list)


class BlockOffRequest(BaseModel):
    start: datetime
    end: datetime
    description: str = ""
    column_index: int = Field(0, description="Day column (Monday=0)")

    @field_validator("start", "end")
    @classmethod
    def _naive_only(cls, value):
        return require_naive(value)


class BlockOffResponse(BaseModel):
    success: bool
    message: str
    blocked_times: List[BlockedTime]
    schedule: Optional[ScheduleSnapshot] = None


@app.get("/schedules/{schedule_id}", response_model=ScheduleSnapshot)
def get_schedule(schedule_id: str, store: ScheduleRepository = Depends(get_schedule_store)):
    """View a stored schedule."""
    schedule = store.get(schedule_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Schedule not found.")
    return schedule.snapshot()


@app.post("/schedules/{schedule_id}/generate", response_model=GenerateResponse)
def generate_schedule(
    schedule_id: str,
    request: GenerateRequest,
    store: ScheduleRepository = Depends(get_schedule_store),
):
    """Place proposed/fixed activities, keeping anything already locked."""
    solver = ConstraintSolver(week_start=request.week_start)
    result = GenerateSchedule(store, solver).execute(
        schedule_id,
        proposals=request.proposed_events,
        fixed_activities=request.fixed_activities,
        schedule_type=request.schedule_type,
    )
    if result.schedule is None:
        raise HTTPException(status_code=400, detail=result.message)
    return GenerateResponse(schedule=result.schedule.snapshot(), message=result.message)


@app.post("/schedules/{schedule_id}/lock", response_model=ScheduleSnapshot)
def lock_and_regenerate(
    schedule_id: str,
    request: LockRequest,
    store: ScheduleRepository = Depends(get_schedule_store),
):
    """Pin the given keys and regenerate everything else."""
    schedule = LockAndRegenerate(store).execute(
        schedule_id,
        request.locked_keys,
        unlocked_keys=request.unlocked_keys,
    )
    return schedule.snapshot()


@app.post("/schedules/{schedule_id}/blocked-times", response_model=BlockOffResponse)
def add_blocked_time(
    schedule_id: str,
    request: BlockOffRequest,
    store: ScheduleRepository = Depends(get_schedule_store),
):
    """Block off a period on one day column."""
    result = block_off_time(
        store,
        schedule_id,
        request.start,
        request.end,
        description=request.description,
        column_index=request.column_index,
    )
    if not result.success:
        status_code = 404 if result.message == SCHEDULE_NOT_FOUND else 400
        raise HTTPException(status_code=status_code, detail=result.message)
    return BlockOffResponse(
        success=True,
        message=result.message,
        blocked_times=result.blocked_times,
        schedule=result.schedule.snapshot(),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

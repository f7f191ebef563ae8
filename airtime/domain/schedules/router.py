"""Schedule router - FastAPI endpoints for the schedule board"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Schedule, User
from .schemas import (
    ManualStatusChange,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleStatus,
    ScheduleUpdate,
)
from .service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedules", tags=["Schedules"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


def to_response(schedule: Schedule) -> ScheduleResponse:
    job = schedule.job
    return ScheduleResponse(
        id=schedule.id,
        job_id=schedule.job_id,
        job_title=job.title if job else None,
        job_status=job.status if job else None,
        client_name=job.client.name if job and job.client else None,
        scheduled_date=schedule.scheduled_date,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        status=schedule.status,
        notes=schedule.notes,
        created_by=schedule.created_by,
        created_at=schedule.created_at,
        updated_at=schedule.updated_at,
    )


@router.get("", response_model=list[ScheduleResponse])
async def list_schedules(
    on_date: Optional[date] = Query(None, alias="date", description="Broadcast date (YYYY-MM-DD)"),
    status: Optional[ScheduleStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Schedules ordered by date then start time"""
    return [to_response(s) for s in service.list_schedules(current_user, on_date, status)]


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    return to_response(service.create_schedule(data, current_user))


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: int,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    return to_response(service.get_schedule(schedule_id, current_user))


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    data: ScheduleUpdate,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    return to_response(service.update_schedule(schedule_id, data, current_user))


@router.post("/{schedule_id}/cancel", response_model=ScheduleResponse)
async def cancel_schedule(
    schedule_id: int,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    return to_response(service.cancel_schedule(schedule_id, current_user))


@router.post("/{schedule_id}/status", response_model=ScheduleResponse)
async def change_job_status(
    schedule_id: int,
    data: ManualStatusChange,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Mark the job behind this slot completed or in progress"""
    return to_response(service.change_status(schedule_id, data.status, current_user))

"""Job router - FastAPI endpoints for ad bookings"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Job, User
from .schemas import (
    JobCreate,
    JobCreateResponse,
    JobResponse,
    JobScheduleSummary,
    JobStatus,
    JobUpdate,
    ScheduleFailure,
)
from .service import PARTIAL_SCHEDULE_FAILURE, JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    """Dependency injection for JobService"""
    return JobService(db)


def to_response(job: Job, with_schedules: bool = False) -> JobResponse:
    return JobResponse(
        id=job.id,
        title=job.title,
        client_id=job.client_id,
        client_name=job.client.name if job.client else None,
        duration=job.duration,
        air_time=job.air_time,
        rate=job.rate,
        repeat_days=job.repeat_days or [],
        description=job.description,
        status=job.status,
        created_by=job.created_by,
        created_at=job.created_at,
        updated_at=job.updated_at,
        schedules=(
            [JobScheduleSummary.model_validate(s) for s in job.schedules] if with_schedules else []
        ),
    )


@router.get("", response_model=list[JobResponse])
async def list_jobs(
    status: Optional[JobStatus] = Query(None),
    search: Optional[str] = Query(None, description="Matches title or description"),
    mine: bool = Query(False, description="Only jobs created by the current user"),
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    return [to_response(job) for job in service.list_jobs(current_user, status, search, mine)]


@router.get("/completed", response_model=list[JobResponse])
async def list_completed_jobs(
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Completed jobs, ready to be invoiced"""
    return [to_response(job) for job in service.list_jobs(current_user, status="completed")]


@router.post("", response_model=JobCreateResponse, status_code=201)
async def create_job(
    data: JobCreate,
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Book a job and create a schedule for every selected date"""
    job, created, failures = service.create_job(data, current_user)
    message = (
        PARTIAL_SCHEDULE_FAILURE
        if failures
        else f"Job and {created} schedules created successfully!"
    )
    return JobCreateResponse(
        job=to_response(job, with_schedules=True),
        schedules_created=created,
        schedule_errors=[ScheduleFailure(**failure) for failure in failures],
        message=message,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int,
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    return to_response(service.get_job(job_id, current_user), with_schedules=True)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    data: JobUpdate,
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    return to_response(service.update_job(job_id, data, current_user), with_schedules=True)


@router.delete("/{job_id}")
async def delete_job(
    job_id: int,
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    return service.delete_job(job_id, current_user)

"""
API endpoints for the job status sync and status analytics
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import config
from ..auth import get_current_user, require_roles
from ..database import get_db
from ..models import Job, Schedule, User
from ..policies import visible_jobs, visible_schedules
from ..services.status_sync import sync_job_statuses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/status", tags=["status"])

# Hit by an external scheduler; keeps the {success, message|error} envelope
cron_router = APIRouter(prefix="/api/cron", tags=["cron"])


class JobStatusSummary(BaseModel):
    scheduled: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0


class ScheduleStatusSummary(BaseModel):
    upcoming: int = 0
    live: int = 0
    completed: int = 0
    cancelled: int = 0


class StatusAnalytics(BaseModel):
    jobs: JobStatusSummary
    schedules: ScheduleStatusSummary


class SyncResult(BaseModel):
    schedules_completed: int
    schedules_live: int
    jobs_completed: int
    jobs_in_progress: int
    invoices_created: int
    total_updated: int


def cron_authorized(authorization: Optional[str]) -> bool:
    """Without CRON_SECRET configured the endpoint is open"""
    if not config.CRON_SECRET:
        return True
    expected = f"Bearer {config.CRON_SECRET}"
    return hmac.compare_digest((authorization or "").encode(), expected.encode())


@cron_router.get("/update-job-status")
async def update_job_status(
    authorization: Optional[str] = Header(None), db: Session = Depends(get_db)
):
    """Run one status sync pass"""
    if not cron_authorized(authorization):
        logger.warning("🚫 Rejected cron call with missing or wrong secret")
        return JSONResponse(status_code=401, content={"success": False, "error": "Unauthorized"})

    try:
        summary = sync_job_statuses(db)
    except Exception as e:
        logger.error(f"❌ Cron job error: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to update job statuses"},
        )

    return {
        "success": True,
        "message": "Job statuses updated successfully",
        "summary": summary,
    }


@router.get("/analytics", response_model=StatusAnalytics)
async def get_status_analytics(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Count of visible jobs and schedules by status"""
    job_counts = (
        visible_jobs(db.query(Job.status, func.count(Job.id)), current_user)
        .group_by(Job.status)
        .all()
    )
    schedule_counts = (
        visible_schedules(db.query(Schedule.status, func.count(Schedule.id)), current_user)
        .group_by(Schedule.status)
        .all()
    )

    jobs = {status: count for status, count in job_counts if status in JobStatusSummary.model_fields}
    schedules = {
        status: count
        for status, count in schedule_counts
        if status in ScheduleStatusSummary.model_fields
    }
    return StatusAnalytics(
        jobs=JobStatusSummary(**jobs), schedules=ScheduleStatusSummary(**schedules)
    )


@router.post("/sync", response_model=SyncResult)
async def run_status_sync(
    _user: User = Depends(require_roles("admin", "host")), db: Session = Depends(get_db)
):
    """
    Manually trigger the status sync
    (In production this runs from the worker cron and the cron endpoint)
    """
    return SyncResult(**sync_job_statuses(db))

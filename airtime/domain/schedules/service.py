"""Schedule service - Business logic for the schedule board"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Schedule, User
from ...policies import ensure_can_modify
from ...services.slots import compute_end_time
from ...services.status_sync import set_job_status
from ..jobs.repository import JobRepository
from .repository import ScheduleRepository
from .schemas import ScheduleCreate, ScheduleUpdate

logger = logging.getLogger(__name__)


class ScheduleService:
    """Service layer for schedule business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    def list_schedules(
        self, user: User, on_date: Optional[date] = None, status: Optional[str] = None
    ) -> list[Schedule]:
        return self.repo.list_schedules(self.db, user, on_date=on_date, status=status)

    def get_schedule(self, schedule_id: int, user: User) -> Schedule:
        schedule = self.repo.get_schedule(self.db, schedule_id, user)
        if not schedule:
            raise HTTPException(status_code=404, detail="Schedule not found")
        return schedule

    def create_schedule(self, data: ScheduleCreate, user: User) -> Schedule:
        """Add one more slot to an existing job"""
        job = JobRepository.get_job(self.db, data.job_id, user)
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")
        ensure_can_modify(user, job, "job")
        if job.status == "cancelled":
            raise HTTPException(status_code=400, detail="Cannot schedule a cancelled job")

        start_time = data.start_time or job.air_time
        end_time = data.end_time or compute_end_time(start_time, job.duration)
        try:
            schedule = self.repo.create_schedule(
                self.db,
                job_id=job.id,
                scheduled_date=data.scheduled_date,
                start_time=start_time,
                end_time=end_time,
                status="upcoming",
                notes=data.notes,
                created_by=user.id,
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating schedule for job {job.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create schedule") from e

        logger.info(f"📅 Schedule {schedule.id} added to job {job.id} on {data.scheduled_date}")
        return schedule

    def update_schedule(self, schedule_id: int, data: ScheduleUpdate, user: User) -> Schedule:
        schedule = self.get_schedule(schedule_id, user)
        ensure_can_modify(user, schedule, "schedule")
        try:
            return self.repo.update_schedule(
                self.db, schedule, **data.model_dump(exclude_unset=True)
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error updating schedule {schedule_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to update schedule") from e

    def cancel_schedule(self, schedule_id: int, user: User) -> Schedule:
        schedule = self.get_schedule(schedule_id, user)
        ensure_can_modify(user, schedule, "schedule")
        if schedule.status == "completed":
            raise HTTPException(status_code=400, detail="A completed schedule cannot be cancelled")
        logger.info(f"🚫 Schedule {schedule_id} cancelled by {user.id}")
        return self.repo.update_schedule(self.db, schedule, status="cancelled")

    def change_status(self, schedule_id: int, status: str, user: User) -> Schedule:
        """Mark the schedule's job completed or in progress from the board"""
        schedule = self.get_schedule(schedule_id, user)
        ensure_can_modify(user, schedule.job, "job")
        if schedule.status == "cancelled" or schedule.job.status == "cancelled":
            raise HTTPException(status_code=400, detail="Cancelled bookings cannot change status")

        try:
            set_job_status(self.db, schedule.job, schedule, status)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(status_code=500, detail="Failed to update job status") from e

        logger.info(f"✅ Job {schedule.job_id} marked {status} via schedule {schedule_id}")
        return schedule

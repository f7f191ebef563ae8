"""Job service - Business logic for booking jobs and their airtime slots"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Client, Job, User
from ...policies import ensure_can_modify, ensure_can_write, visible_clients
from ...realtime import publish_change, serialize_row
from ...services.slots import compute_end_time
from .repository import JobRepository
from .schemas import JobCreate, JobUpdate

logger = logging.getLogger(__name__)

PARTIAL_SCHEDULE_FAILURE = "Job created but some schedules failed to create"


class JobService:
    """Service layer for job business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository()

    def list_jobs(
        self,
        user: User,
        status: Optional[str] = None,
        search: Optional[str] = None,
        mine: bool = False,
    ) -> list[Job]:
        return self.repo.list_jobs(
            self.db, user, status=status, search=search, owner_id=user.id if mine else None
        )

    def get_job(self, job_id: int, user: User) -> Job:
        job = self.repo.get_job(self.db, job_id, user)
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")
        return job

    def _get_client(self, client_id: int, user: User) -> Client:
        client = (
            visible_clients(self.db.query(Client), user).filter(Client.id == client_id).first()
        )
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_job(self, data: JobCreate, user: User) -> tuple[Job, int, list[dict]]:
        """
        Create the job, then one upcoming schedule per selected date.

        A failing schedule does not undo the job; failures are collected and
        reported together. Returns (job, schedules_created, failures).
        """
        ensure_can_write(user)
        self._get_client(data.client_id, user)

        try:
            job = self.repo.create_job(
                self.db,
                user.id,
                title=data.title,
                client_id=data.client_id,
                duration=data.duration,
                air_time=data.air_time,
                rate=data.rate,
                description=data.description,
                status=data.status,
                repeat_days=[d.isoformat() for d in data.schedule_dates],
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating job: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create job") from e

        end_time = compute_end_time(data.air_time, data.duration)
        created = 0
        failures = []
        for scheduled_date in data.schedule_dates:
            try:
                self.repo.add_schedule(
                    self.db,
                    job,
                    scheduled_date=scheduled_date,
                    start_time=data.air_time,
                    end_time=end_time,
                    status="upcoming",
                    created_by=user.id,
                )
                created += 1
            except Exception as e:
                self.db.rollback()
                logger.error(f"❌ Error creating schedule for {scheduled_date}: {str(e)}")
                failures.append({"date": scheduled_date, "error": "Failed to create schedule"})

        if failures:
            logger.warning(f"⚠️ Job {job.id}: {len(failures)} schedule(s) failed to create")
        else:
            logger.info(f"✅ Job {job.id} created with {created} schedules")

        self.db.refresh(job)
        publish_change("jobs", "INSERT", serialize_row(job), None)
        return job, created, failures

    def update_job(self, job_id: int, data: JobUpdate, user: User) -> Job:
        job = self.get_job(job_id, user)
        ensure_can_modify(user, job, "job")
        old = serialize_row(job)

        updates = data.model_dump(exclude_unset=True)
        if updates.get("client_id") is not None and updates["client_id"] != job.client_id:
            self._get_client(updates["client_id"], user)

        if updates.get("status") == "cancelled":
            for schedule in job.schedules:
                if schedule.status in ("upcoming", "live"):
                    schedule.status = "cancelled"

        new_air_time = updates.get("air_time") or job.air_time
        new_duration = updates.get("duration") or job.duration
        if (new_air_time, new_duration) != (job.air_time, job.duration):
            end_time = compute_end_time(new_air_time, new_duration)
            for schedule in job.schedules:
                if schedule.status == "upcoming":
                    schedule.start_time = new_air_time
                    schedule.end_time = end_time

        try:
            job = self.repo.update_job(self.db, job, **updates)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error updating job {job_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to update job") from e

        publish_change("jobs", "UPDATE", serialize_row(job), old)
        return job

    def delete_job(self, job_id: int, user: User) -> dict:
        job = self.get_job(job_id, user)
        ensure_can_modify(user, job, "job")
        if self.repo.is_invoiced(self.db, job.id):
            raise HTTPException(status_code=409, detail="Job has been invoiced and cannot be deleted")

        old = serialize_row(job)
        self.repo.delete_job(self.db, job)
        logger.info(f"🗑️ Job {job_id} deleted by {user.id}")
        publish_change("jobs", "DELETE", None, old)
        return {"message": "Job deleted"}

"""Job repository - Database operations for jobs"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import InvoiceItem, Job, Schedule, User
from ...policies import visible_jobs


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def list_jobs(
        db: Session,
        user: User,
        status: Optional[str] = None,
        search: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> list[Job]:
        """Search and filter jobs, newest first"""
        query = visible_jobs(db.query(Job).options(joinedload(Job.client)), user)

        if status:
            query = query.filter(Job.status == status)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(Job.title.ilike(search_term) | Job.description.ilike(search_term))

        if owner_id:
            query = query.filter(Job.created_by == owner_id)

        return query.order_by(Job.created_at.desc(), Job.id.desc()).all()

    @staticmethod
    def get_job(db: Session, job_id: int, user: User) -> Optional[Job]:
        return (
            visible_jobs(
                db.query(Job).options(joinedload(Job.client), joinedload(Job.schedules)), user
            )
            .filter(Job.id == job_id)
            .first()
        )

    @staticmethod
    def create_job(db: Session, user_id: str, **job_data) -> Job:
        job = Job(created_by=user_id, **job_data)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    @staticmethod
    def add_schedule(db: Session, job: Job, **schedule_data) -> Schedule:
        schedule = Schedule(job_id=job.id, **schedule_data)
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def update_job(db: Session, job: Job, **updates) -> Job:
        """Update a job with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(job, key):
                setattr(job, key, value)
        db.commit()
        db.refresh(job)
        return job

    @staticmethod
    def delete_job(db: Session, job: Job) -> None:
        db.delete(job)
        db.commit()

    @staticmethod
    def is_invoiced(db: Session, job_id: int) -> bool:
        return db.query(InvoiceItem.id).filter(InvoiceItem.job_id == job_id).first() is not None

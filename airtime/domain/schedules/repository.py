"""Schedule repository - Database operations for airtime slots"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Job, Schedule, User
from ...policies import visible_schedules


class ScheduleRepository:
    """Repository for schedule database operations"""

    @staticmethod
    def _with_job(db: Session, user: User):
        return visible_schedules(
            db.query(Schedule).options(joinedload(Schedule.job).joinedload(Job.client)), user
        )

    @staticmethod
    def list_schedules(
        db: Session,
        user: User,
        on_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[Schedule]:
        """Schedules in broadcast order"""
        query = ScheduleRepository._with_job(db, user)
        if on_date:
            query = query.filter(Schedule.scheduled_date == on_date)
        if status:
            query = query.filter(Schedule.status == status)
        return query.order_by(Schedule.scheduled_date.asc(), Schedule.start_time.asc()).all()

    @staticmethod
    def get_schedule(db: Session, schedule_id: int, user: User) -> Optional[Schedule]:
        return ScheduleRepository._with_job(db, user).filter(Schedule.id == schedule_id).first()

    @staticmethod
    def create_schedule(db: Session, **schedule_data) -> Schedule:
        schedule = Schedule(**schedule_data)
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def update_schedule(db: Session, schedule: Schedule, **updates) -> Schedule:
        for key, value in updates.items():
            if value is not None and hasattr(schedule, key):
                setattr(schedule, key, value)
        db.commit()
        db.refresh(schedule)
        return schedule

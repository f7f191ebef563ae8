"""
Row-level visibility policies.

Each role sees a different slice of the tables:
- admin: every row, full write access
- host: every job/client/schedule/invoice, writes only rows they created
- advertiser: read-only access to rows belonging to the client whose
  email matches their own

The filters are applied to SQLAlchemy queries so repositories never
return rows the caller is not allowed to see.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session

from .models import Client, Invoice, Job, Schedule, User

logger = logging.getLogger(__name__)


def _advertiser_client_ids(user: User):
    return select(Client.id).where(func.lower(Client.email) == user.email.lower())


def visible_clients(query: Query, user: User) -> Query:
    if user.role == "advertiser":
        return query.filter(Client.id.in_(_advertiser_client_ids(user)))
    return query


def visible_jobs(query: Query, user: User) -> Query:
    if user.role == "advertiser":
        return query.filter(Job.client_id.in_(_advertiser_client_ids(user)))
    return query


def visible_schedules(query: Query, user: User) -> Query:
    if user.role == "advertiser":
        job_ids = select(Job.id).where(Job.client_id.in_(_advertiser_client_ids(user)))
        return query.filter(Schedule.job_id.in_(job_ids))
    return query


def visible_invoices(query: Query, user: User) -> Query:
    if user.role == "advertiser":
        return query.filter(Invoice.client_id.in_(_advertiser_client_ids(user)))
    return query


def visible_client_ids(db: Session, user: User) -> Optional[set[int]]:
    """Client ids whose rows the user may see, or None when every client is visible"""
    if user.role == "advertiser":
        return set(db.scalars(_advertiser_client_ids(user)).all())
    return None


def can_modify(user: User, row) -> bool:
    """Admins modify anything; hosts only what they created"""
    if user.role == "admin":
        return True
    if user.role == "host":
        return getattr(row, "created_by", None) == user.id
    return False


def ensure_can_modify(user: User, row, label: str = "record") -> None:
    if not can_modify(user, row):
        logger.warning(f"⚠️ {user.email} ({user.role}) tried to modify {label} {row.id}")
        raise HTTPException(status_code=403, detail=f"You cannot modify this {label}")


def ensure_can_write(user: User) -> None:
    """Advertisers are read-only across the board"""
    if user.role not in ("admin", "host"):
        raise HTTPException(status_code=403, detail="You do not have permission for this action")

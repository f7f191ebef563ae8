"""
Dashboard and analytics aggregation

The report figures are computed by plain functions over already-fetched
rows so they can be exercised without a database.
"""

import logging
from collections import Counter, defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Invoice, Job, Schedule, User
from ...policies import visible_jobs, visible_schedules

logger = logging.getLogger(__name__)

DASHBOARD_LIST_SIZE = 5
TOP_CLIENTS = 5


def period_start(period: str, today: Optional[date] = None) -> date:
    """First day of the current week (Monday), month, quarter or year"""
    today = today or date.today()
    if period == "week":
        return today - timedelta(days=today.weekday())
    if period == "quarter":
        return date(today.year, 3 * ((today.month - 1) // 3) + 1, 1)
    if period == "year":
        return date(today.year, 1, 1)
    return today.replace(day=1)


def revenue_by_month(invoices: Iterable) -> list[dict]:
    """Invoice totals per calendar month, newest month first"""
    totals: dict[tuple[int, int], float] = defaultdict(float)
    for invoice in invoices:
        if invoice.created_at is None:
            continue
        totals[(invoice.created_at.year, invoice.created_at.month)] += invoice.total_amount

    return [
        {"month": date(year, month, 1).strftime("%B %Y"), "amount": amount}
        for (year, month), amount in sorted(totals.items(), reverse=True)
    ]


def top_clients(jobs: Iterable, limit: int = TOP_CLIENTS) -> list[dict]:
    """Clients ranked by the summed rate of their jobs"""
    revenue: dict[str, float] = defaultdict(float)
    for job in jobs:
        name = job.client.name if job.client else "Unknown Client"
        revenue[name] += job.rate or 0
    ranked = sorted(revenue.items(), key=lambda item: item[1], reverse=True)
    return [{"client": client, "revenue": amount} for client, amount in ranked[:limit]]


def summarize(jobs: list, invoices: list) -> dict:
    """Headline figures for the analytics page"""
    total_jobs = len(jobs)
    completed_jobs = sum(1 for job in jobs if job.status == "completed")
    paid_invoices = sum(1 for invoice in invoices if invoice.status == "paid")
    status_counts = Counter(job.status for job in jobs)

    return {
        "total_revenue": sum(invoice.total_amount for invoice in invoices),
        "total_jobs": total_jobs,
        "completed_jobs": completed_jobs,
        "pending_invoices": sum(1 for invoice in invoices if invoice.status == "pending"),
        "revenue_by_month": revenue_by_month(invoices),
        "top_clients": top_clients(jobs),
        "jobs_by_status": [
            {"status": status, "count": count} for status, count in status_counts.items()
        ],
        "average_job_value": (
            sum(job.rate or 0 for job in jobs) / total_jobs if total_jobs else 0
        ),
        "completion_rate": completed_jobs / total_jobs * 100 if total_jobs else 0,
        "payment_rate": paid_invoices / len(invoices) * 100 if invoices else 0,
    }


class AnalyticsService:
    """Read-only aggregates over jobs, schedules and invoices"""

    def __init__(self, db: Session):
        self.db = db

    def dashboard(self, user: User, today: Optional[date] = None) -> dict:
        today = today or date.today()
        jobs = visible_jobs(self.db.query(Job), user)
        schedules = visible_schedules(self.db.query(Schedule), user)

        total_revenue = (
            jobs.filter(Job.status == "completed")
            .with_entities(func.coalesce(func.sum(Job.rate), 0))
            .scalar()
        )
        recent_jobs = (
            jobs.options(joinedload(Job.client))
            .order_by(Job.created_at.desc(), Job.id.desc())
            .limit(DASHBOARD_LIST_SIZE)
            .all()
        )
        next_schedules = (
            schedules.options(joinedload(Schedule.job).joinedload(Job.client))
            .filter(Schedule.status == "upcoming", Schedule.scheduled_date >= today)
            .order_by(Schedule.scheduled_date.asc(), Schedule.start_time.asc())
            .limit(DASHBOARD_LIST_SIZE)
            .all()
        )

        return {
            "total_revenue": float(total_revenue or 0),
            "total_jobs": jobs.count(),
            "active_jobs": jobs.filter(Job.status == "in_progress").count(),
            "upcoming_schedules": schedules.filter(Schedule.scheduled_date >= today).count(),
            "recent_jobs": [
                {
                    "id": job.id,
                    "title": job.title,
                    "client_name": job.client.name if job.client else None,
                    "status": job.status,
                    "rate": job.rate,
                    "created_at": job.created_at,
                }
                for job in recent_jobs
            ],
            "next_schedules": [
                {
                    "id": s.id,
                    "job_id": s.job_id,
                    "job_title": s.job.title if s.job else None,
                    "client_name": s.job.client.name if s.job and s.job.client else None,
                    "scheduled_date": s.scheduled_date,
                    "start_time": s.start_time,
                    "end_time": s.end_time,
                    "status": s.status,
                }
                for s in next_schedules
            ],
        }

    def analytics(self, user: User, period: str = "month", today: Optional[date] = None) -> dict:
        """Figures over the caller's own jobs and invoices created since the period start"""
        since = period_start(period, today)
        since_dt = datetime.combine(since, datetime.min.time())

        jobs = (
            self.db.query(Job)
            .options(joinedload(Job.client))
            .filter(Job.created_by == user.id, Job.created_at >= since_dt)
            .all()
        )
        invoices = (
            self.db.query(Invoice)
            .filter(Invoice.created_by == user.id, Invoice.created_at >= since_dt)
            .all()
        )
        logger.debug(f"📊 Analytics for {user.id}: {len(jobs)} jobs, {len(invoices)} invoices")

        return {"period": period, "since": since, **summarize(jobs, invoices)}

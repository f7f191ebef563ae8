"""
Automated status transitions for jobs and schedules

Schedules: upcoming → live (slot window open) → completed (slot window closed)
Jobs: scheduled → in_progress (a schedule is live) → completed (last schedule ended)

The pass is re-evaluated from scratch on every call and is safe to run
repeatedly: a row is only written when its status actually changes.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from .. import config
from ..domain.invoices.repository import InvoiceRepository
from ..models import Invoice, Job, Schedule
from ..realtime import publish_change, serialize_row
from .slots import slot_window

logger = logging.getLogger(__name__)


def _auto_invoice(db: Session, job: Job, now: datetime, drawn_numbers: set) -> Optional[Invoice]:
    """Pending invoice for a job the pass just completed; skipped if no number is free"""
    try:
        number = InvoiceRepository.allocate_invoice_number(db, taken=drawn_numbers)
    except ValueError as e:
        logger.warning(f"⚠️ Job {job.id} completed without an invoice: {e}")
        return None

    invoice = InvoiceRepository.build_job_invoice(
        job,
        amount=job.rate,
        due_date=now + timedelta(days=config.INVOICE_DUE_DAYS),
        created_by=job.created_by,
        invoice_number=number,
    )
    db.add(invoice)
    return invoice


def sync_job_statuses(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Flip schedule and job statuses according to wall-clock time.

    Returns:
        dict: Summary of status changes made
    """
    now = now or datetime.now()
    summary = {
        "schedules_completed": 0,
        "schedules_live": 0,
        "jobs_completed": 0,
        "jobs_in_progress": 0,
        "invoices_created": 0,
        "total_updated": 0,
    }
    changed_jobs: list[tuple[Job, dict]] = []
    created_invoices: list[Invoice] = []
    drawn_numbers: set[str] = set()

    try:
        schedules = (
            db.query(Schedule)
            .options(joinedload(Schedule.job))
            .filter(Schedule.status != "cancelled")
            .order_by(Schedule.scheduled_date.asc(), Schedule.start_time.asc())
            .all()
        )

        windows_by_job: dict[int, list] = defaultdict(list)
        for schedule in schedules:
            try:
                start, end = slot_window(
                    schedule.scheduled_date, schedule.start_time, schedule.end_time
                )
            except ValueError as e:
                logger.warning(f"⚠️ Skipping schedule {schedule.id}: {e}")
                continue

            if end < now:
                if schedule.status in ("upcoming", "live"):
                    schedule.status = "completed"
                    schedule.updated_at = now
                    summary["schedules_completed"] += 1
                    logger.info(f"✅ Schedule {schedule.id} transitioned → completed")
            elif start <= now < end and schedule.status == "upcoming":
                schedule.status = "live"
                schedule.updated_at = now
                summary["schedules_live"] += 1
                logger.info(f"📻 Schedule {schedule.id} transitioned: upcoming → live")

            windows_by_job[schedule.job_id].append((schedule, end))

        for entries in windows_by_job.values():
            job = entries[0][0].job
            if job is None or job.status == "cancelled":
                continue

            old = serialize_row(job)
            latest_end = max(end for _, end in entries)
            if latest_end < now:
                if job.status != "completed":
                    job.status = "completed"
                    job.updated_at = now
                    summary["jobs_completed"] += 1
                    changed_jobs.append((job, old))
                    logger.info(f"✅ Job {job.id} transitioned: {old['status']} → completed")
                    if config.AUTO_INVOICE_COMPLETED_JOBS and not job.invoice_items:
                        invoice = _auto_invoice(db, job, now, drawn_numbers)
                        if invoice is not None:
                            created_invoices.append(invoice)
                            summary["invoices_created"] += 1
            elif any(schedule.status == "live" for schedule, _ in entries):
                if job.status != "in_progress":
                    job.status = "in_progress"
                    job.updated_at = now
                    summary["jobs_in_progress"] += 1
                    changed_jobs.append((job, old))
                    logger.info(f"📻 Job {job.id} transitioned: {old['status']} → in_progress")

        total = (
            summary["schedules_completed"]
            + summary["schedules_live"]
            + summary["jobs_completed"]
            + summary["jobs_in_progress"]
        )
        if total > 0 or created_invoices:
            db.commit()
            summary["total_updated"] = total
            logger.info(f"📊 Status sync summary: {summary}")
        else:
            logger.debug("ℹ️ No job/schedule status updates needed")

    except Exception as e:
        logger.error(f"❌ Error updating job statuses: {str(e)}")
        db.rollback()
        raise

    for job, old in changed_jobs:
        publish_change("jobs", "UPDATE", serialize_row(job), old)
    for invoice in created_invoices:
        publish_change("invoices", "INSERT", serialize_row(invoice), None)

    return summary


def mark_overdue_invoices(db: Session, now: Optional[datetime] = None) -> int:
    """Pending invoices past their due date become overdue"""
    now = now or datetime.now()
    try:
        invoices = (
            db.query(Invoice).filter(Invoice.status == "pending", Invoice.due_date < now).all()
        )
        for invoice in invoices:
            invoice.status = "overdue"
            invoice.updated_at = now
        if invoices:
            db.commit()
            logger.info(f"📊 Marked {len(invoices)} invoices overdue")
    except Exception as e:
        logger.error(f"❌ Error marking overdue invoices: {str(e)}")
        db.rollback()
        raise

    for invoice in invoices:
        publish_change("invoices", "UPDATE", serialize_row(invoice), None)
    return len(invoices)


def set_job_status(db: Session, job: Job, schedule: Schedule, status: str) -> None:
    """
    Manual transition from the schedule board.

    completed → job and schedule completed
    in_progress → job in progress, schedule live
    """
    if status not in ("completed", "in_progress"):
        raise ValueError(f"Unsupported manual status '{status}'")

    old = serialize_row(job)
    now = datetime.now()
    job.status = status
    job.updated_at = now
    schedule.status = "completed" if status == "completed" else "live"
    schedule.updated_at = now
    try:
        db.commit()
    except Exception as e:
        logger.error(f"❌ Error updating job {job.id} status: {str(e)}")
        db.rollback()
        raise
    db.refresh(job)
    db.refresh(schedule)
    publish_change("jobs", "UPDATE", serialize_row(job), old)

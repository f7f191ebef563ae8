"""Invoice service - Business logic for invoice operations"""

import logging
from datetime import datetime, timedelta

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ... import config
from ...models import Client, Invoice, InvoiceItem, Job, User
from ...policies import ensure_can_modify, ensure_can_write, visible_clients, visible_jobs
from ...realtime import publish_change, serialize_row
from ...services.invoice_pdf import InvoicePDFGenerator
from .repository import InvoiceRepository
from .schemas import InvoiceCreate, InvoiceFromJob, InvoiceUpdate

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service layer for invoice business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InvoiceRepository()

    def list_invoices(self, user: User, status: str = None) -> list[Invoice]:
        return self.repo.list_invoices(self.db, user, status)

    def get_invoice(self, invoice_id: int, user: User) -> Invoice:
        invoice = self.repo.get_invoice(self.db, invoice_id, user)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return invoice

    def _get_job(self, job_id: int, user: User) -> Job:
        job = visible_jobs(self.db.query(Job), user).filter(Job.id == job_id).first()
        if not job:
            raise HTTPException(status_code=404, detail=f"Job {job_id} not found")
        return job

    def _unique_number(self, requested: str = None) -> str:
        if requested:
            if self.repo.invoice_number_exists(self.db, requested):
                raise HTTPException(status_code=409, detail="Invoice number already exists")
            return requested
        try:
            return self.repo.allocate_invoice_number(self.db)
        except ValueError as e:
            logger.error(f"❌ {e}")
            raise HTTPException(status_code=500, detail="Could not allocate an invoice number")

    def _default_due_date(self) -> datetime:
        return datetime.now() + timedelta(days=config.INVOICE_DUE_DAYS)

    def _save(self, invoice: Invoice) -> Invoice:
        try:
            invoice = self.repo.save_invoice(self.db, invoice)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating invoice: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create invoice") from e
        logger.info(f"🧾 Invoice {invoice.invoice_number} created: {invoice.total_amount:.2f}")
        publish_change("invoices", "INSERT", serialize_row(invoice), None)
        return invoice

    def create_invoice(self, data: InvoiceCreate, user: User) -> Invoice:
        """Create an invoice with line items for jobs of one client"""
        ensure_can_write(user)

        client = (
            visible_clients(self.db.query(Client), user).filter(Client.id == data.client_id).first()
        )
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")

        items = []
        for item in data.items:
            job = self._get_job(item.job_id, user)
            if job.client_id != client.id:
                raise HTTPException(
                    status_code=400, detail=f"Job {job.id} does not belong to this client"
                )
            ensure_can_modify(user, job, "job")
            items.append(
                InvoiceItem(
                    job_id=job.id,
                    description=item.description or job.title,
                    quantity=item.quantity,
                    rate=item.rate,
                    amount=round(item.quantity * item.rate, 2),
                )
            )

        invoice = Invoice(
            invoice_number=self._unique_number(data.invoice_number),
            client_id=client.id,
            total_amount=round(sum(i.amount for i in items), 2),
            status=data.status,
            due_date=data.due_date or self._default_due_date(),
            paid_date=datetime.now() if data.status == "paid" else None,
            notes=data.notes,
            created_by=user.id,
        )
        invoice.items.extend(items)
        return self._save(invoice)

    def create_invoice_for_job(self, job_id: int, data: InvoiceFromJob, user: User) -> Invoice:
        """Invoice a completed job"""
        ensure_can_write(user)
        job = self._get_job(job_id, user)
        ensure_can_modify(user, job, "job")
        if job.status != "completed":
            raise HTTPException(status_code=400, detail="Only completed jobs can be invoiced")

        amount = data.amount if data.amount is not None else job.rate
        invoice = self.repo.build_job_invoice(
            job,
            amount=amount,
            due_date=data.due_date or self._default_due_date(),
            created_by=user.id,
            invoice_number=self._unique_number(),
            notes=data.notes,
        )
        return self._save(invoice)

    def update_invoice(self, invoice_id: int, data: InvoiceUpdate, user: User) -> Invoice:
        invoice = self.get_invoice(invoice_id, user)
        ensure_can_modify(user, invoice, "invoice")
        old = serialize_row(invoice)

        updates = {"due_date": data.due_date, "notes": data.notes}
        if data.status is not None and data.status != invoice.status:
            updates["status"] = data.status
            if data.status == "paid":
                updates["paid_date"] = datetime.now()
            else:
                invoice.paid_date = None

        invoice = self.repo.update_invoice(self.db, invoice, **updates)
        publish_change("invoices", "UPDATE", serialize_row(invoice), old)
        return invoice

    def delete_invoice(self, invoice_id: int, user: User) -> dict:
        invoice = self.get_invoice(invoice_id, user)
        ensure_can_modify(user, invoice, "invoice")
        old = serialize_row(invoice)
        self.repo.delete_invoice(self.db, invoice)
        publish_change("invoices", "DELETE", None, old)
        return {"message": "Invoice deleted"}

    def render_pdf(self, invoice_id: int, user: User) -> tuple[bytes, str]:
        """PDF bytes and download filename"""
        invoice = self.get_invoice(invoice_id, user)
        generator = InvoicePDFGenerator(invoice)
        return generator.generate(), f"{generator.display_number}.pdf"

"""Invoice repository - Database operations for invoices"""

import random
import time
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Invoice, InvoiceItem, Job, User
from ...policies import visible_invoices


class InvoiceRepository:
    """Repository for invoice database operations"""

    @staticmethod
    def _with_details(db: Session):
        return db.query(Invoice).options(
            joinedload(Invoice.client),
            joinedload(Invoice.items).joinedload(InvoiceItem.job),
        )

    @staticmethod
    def list_invoices(db: Session, user: User, status: Optional[str] = None) -> list[Invoice]:
        """Invoices visible to the user, newest first"""
        query = visible_invoices(InvoiceRepository._with_details(db), user)
        if status:
            query = query.filter(Invoice.status == status)
        return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()

    @staticmethod
    def get_invoice(db: Session, invoice_id: int, user: User) -> Optional[Invoice]:
        query = visible_invoices(InvoiceRepository._with_details(db), user)
        return query.filter(Invoice.id == invoice_id).first()

    @staticmethod
    def invoice_number_exists(db: Session, invoice_number: str) -> bool:
        return (
            db.query(Invoice.id).filter(Invoice.invoice_number == invoice_number).first()
            is not None
        )

    @staticmethod
    def generate_invoice_number() -> str:
        """INV-<last 6 digits of the ms timestamp>-<3 random digits>"""
        timestamp = str(int(time.time() * 1000))[-6:]
        return f"INV-{timestamp}-{random.randint(0, 999):03d}"

    @staticmethod
    def allocate_invoice_number(db: Session, taken: Optional[set] = None, attempts: int = 5) -> str:
        """
        Draw an invoice number that is neither stored yet nor already handed out
        through `taken` (numbers drawn for invoices still pending in the session).
        Raises ValueError when every attempt collides.
        """
        taken = taken if taken is not None else set()
        for _ in range(attempts):
            number = InvoiceRepository.generate_invoice_number()
            if number in taken or InvoiceRepository.invoice_number_exists(db, number):
                continue
            taken.add(number)
            return number
        raise ValueError(f"Could not allocate an invoice number after {attempts} attempts")

    @staticmethod
    def build_job_invoice(
        job: Job,
        amount: float,
        due_date: datetime,
        created_by: str,
        invoice_number: str,
        notes: Optional[str] = None,
    ) -> Invoice:
        """Unsaved pending invoice with one line item for a job"""
        invoice = Invoice(
            invoice_number=invoice_number,
            client_id=job.client_id,
            total_amount=amount,
            status="pending",
            due_date=due_date,
            notes=notes,
            created_by=created_by,
        )
        invoice.items.append(
            InvoiceItem(job_id=job.id, description=job.title, quantity=1, rate=amount, amount=amount)
        )
        return invoice

    @staticmethod
    def save_invoice(db: Session, invoice: Invoice) -> Invoice:
        db.add(invoice)
        db.commit()
        db.refresh(invoice)
        return invoice

    @staticmethod
    def update_invoice(db: Session, invoice: Invoice, **updates) -> Invoice:
        """Update an invoice with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(invoice, key):
                setattr(invoice, key, value)
        db.commit()
        db.refresh(invoice)
        return invoice

    @staticmethod
    def delete_invoice(db: Session, invoice: Invoice) -> None:
        db.delete(invoice)
        db.commit()

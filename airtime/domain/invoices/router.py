"""Invoice router - FastAPI endpoints for invoicing and PDF export"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Invoice, User
from .schemas import (
    InvoiceCreate,
    InvoiceFromJob,
    InvoiceItemResponse,
    InvoiceResponse,
    InvoiceStatus,
    InvoiceUpdate,
)
from .service import InvoiceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Invoices"])


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    """Dependency injection for InvoiceService"""
    return InvoiceService(db)


def to_response(invoice: Invoice) -> InvoiceResponse:
    client = invoice.client
    return InvoiceResponse(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        client_id=invoice.client_id,
        client_name=client.name if client else "Unknown",
        client_email=client.email if client else None,
        client_address=client.address if client else None,
        total_amount=invoice.total_amount,
        status=invoice.status,
        due_date=invoice.due_date,
        paid_date=invoice.paid_date,
        notes=invoice.notes,
        created_by=invoice.created_by,
        created_at=invoice.created_at,
        items=[
            InvoiceItemResponse(
                id=item.id,
                job_id=item.job_id,
                job_title=item.job.title if item.job else None,
                description=item.description,
                quantity=item.quantity,
                rate=item.rate,
                amount=item.amount,
            )
            for item in invoice.items
        ],
    )


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    status: Optional[InvoiceStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Get invoices visible to the current user"""
    return [to_response(inv) for inv in service.list_invoices(current_user, status)]


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    data: InvoiceCreate,
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return to_response(service.create_invoice(data, current_user))


@router.post("/from-job/{job_id}", response_model=InvoiceResponse, status_code=201)
async def create_invoice_for_job(
    job_id: int,
    data: InvoiceFromJob,
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Generate an invoice for a completed job"""
    return to_response(service.create_invoice_for_job(job_id, data, current_user))


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return to_response(service.get_invoice(invoice_id, current_user))


@router.patch("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return to_response(service.update_invoice(invoice_id, data, current_user))


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: int,
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.delete_invoice(invoice_id, current_user)


@router.get("/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: int,
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Download the invoice as a single-page PDF"""
    pdf_bytes, filename = service.render_pdf(invoice_id, current_user)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

"""Invoice domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

InvoiceStatus = Literal["pending", "paid", "overdue"]


class InvoiceItemCreate(BaseModel):
    job_id: int
    description: Optional[str] = None  # defaults to the job title
    quantity: float = Field(default=1, gt=0)
    rate: float = Field(ge=0)


class InvoiceCreate(BaseModel):
    client_id: int
    items: list[InvoiceItemCreate] = Field(min_length=1)
    invoice_number: Optional[str] = None
    due_date: Optional[datetime] = None
    status: InvoiceStatus = "pending"
    notes: Optional[str] = None


class InvoiceFromJob(BaseModel):
    """Invoice a single completed job; amount defaults to the job rate"""

    amount: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class InvoiceUpdate(BaseModel):
    status: Optional[InvoiceStatus] = None
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class InvoiceItemResponse(BaseModel):
    id: int
    job_id: int
    job_title: Optional[str] = None
    description: str
    quantity: float
    rate: float
    amount: float


class InvoiceResponse(BaseModel):
    id: int
    invoice_number: str
    client_id: int
    client_name: str
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    total_amount: float
    status: str
    due_date: datetime
    paid_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None
    items: list[InvoiceItemResponse] = []

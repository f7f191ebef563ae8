from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

USER_ROLES = ("admin", "host", "advertiser")
JOB_STATUSES = ("scheduled", "in_progress", "completed", "cancelled")
SCHEDULE_STATUSES = ("upcoming", "live", "completed", "cancelled")
INVOICE_STATUSES = ("pending", "paid", "overdue")


class User(Base):
    __tablename__ = "users"

    # Auth provider uid (Firebase token "sub")
    id = Column(String(128), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="advertiser")  # admin, host, advertiser
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    clients = relationship("Client", back_populates="owner")
    jobs = relationship("Job", back_populates="owner")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    created_by = Column(String(128), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="clients")
    jobs = relationship("Job", back_populates="client")
    invoices = relationship("Invoice", back_populates="client")

    __table_args__ = (Index("idx_clients_user_id", "created_by"),)


class Job(Base):
    """A booked advertisement placement for a client"""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    duration = Column(String(50), nullable=False)  # e.g. "30 sec", "1 min"
    air_time = Column(String(10), nullable=False)  # HH:MM format
    rate = Column(Float, nullable=False)
    repeat_days = Column(JSON, default=list)  # YYYY-MM-DD broadcast dates
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="scheduled")
    created_by = Column(String(128), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="jobs")
    client = relationship("Client", back_populates="jobs")
    schedules = relationship(
        "Schedule",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="Schedule.scheduled_date",
    )
    invoice_items = relationship("InvoiceItem", back_populates="job")

    __table_args__ = (
        Index("idx_jobs_created_at", "created_at"),
        Index("idx_jobs_status", "status"),
        Index("idx_jobs_user_id", "created_by"),
    )


class Schedule(Base):
    """One concrete airtime occurrence of a job"""

    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    scheduled_date = Column(Date, nullable=False)
    start_time = Column(String(10), nullable=False)  # HH:MM or HH:MM:SS
    end_time = Column(String(10), nullable=False)
    status = Column(String(20), nullable=False, default="upcoming")
    notes = Column(String(1000), nullable=True)
    created_by = Column(String(128), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    job = relationship("Job", back_populates="schedules")

    __table_args__ = (Index("idx_schedules_scheduled_date", "scheduled_date"),)


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    total_amount = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, paid, overdue
    due_date = Column(DateTime, nullable=False)
    paid_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(128), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="invoices")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    description = Column(String(500), nullable=False)
    quantity = Column(Float, nullable=False, default=1)
    rate = Column(Float, nullable=False)
    amount = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    invoice = relationship("Invoice", back_populates="items")
    job = relationship("Job", back_populates="invoice_items")

"""Shared pytest fixtures for the test suite."""

import os
from datetime import date, datetime

import pytest

# Configure the app BEFORE any airtime code imports.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REALTIME_ENABLED"] = "false"
os.environ["FIREBASE_PROJECT_ID"] = "airtime-test"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from airtime.auth import get_current_user  # noqa: E402
from airtime.database import Base, get_db  # noqa: E402
from airtime.main import app  # noqa: E402
from airtime.models import Client, Invoice, InvoiceItem, Job, Schedule, User  # noqa: E402

engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SEED_USERS = [
    {"id": "admin-uid", "email": "admin@station.ng", "name": "Ada Admin", "role": "admin"},
    {"id": "host-uid", "email": "host@station.ng", "name": "Hal Host", "role": "host"},
    {"id": "host2-uid", "email": "other@station.ng", "name": "Olu Host", "role": "host"},
    {"id": "adv-uid", "email": "buyer@acme.ng", "name": "Bola Buyer", "role": "advertiser"},
]


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class Identity:
    """Which seeded user the fake auth dependency resolves to"""

    user_id = "admin-uid"


def override_get_current_user(db: Session = Depends(get_db)) -> User:
    return db.query(User).filter(User.id == Identity.user_id).one()


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    db.add_all([User(**u) for u in SEED_USERS])
    db.commit()
    db.close()
    Identity.user_id = "admin-uid"
    yield


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Switch the authenticated user: login_as("host-uid")"""

    def _login(user_id: str):
        Identity.user_id = user_id

    return _login


class Factory:
    """Builds rows directly in the test database"""

    def __init__(self, db: Session):
        self.db = db

    def client(self, owner="admin-uid", name="Acme Foods", email="buyer@acme.ng", **kw):
        row = Client(name=name, email=email, created_by=owner, **kw)
        self.db.add(row)
        self.db.commit()
        return row

    def job(
        self,
        client,
        owner="admin-uid",
        title="Breakfast Show Spot",
        air_time="09:00",
        duration="5 min",
        rate=15000.0,
        status="scheduled",
        slots=(),
        **kw,
    ):
        """slots: iterable of (date, start, end[, status])"""
        row = Job(
            title=title,
            client_id=client.id,
            duration=duration,
            air_time=air_time,
            rate=rate,
            status=status,
            repeat_days=[slot[0].isoformat() for slot in slots],
            created_by=owner,
            **kw,
        )
        self.db.add(row)
        self.db.flush()
        for slot in slots:
            scheduled_date, start, end = slot[:3]
            self.db.add(
                Schedule(
                    job_id=row.id,
                    scheduled_date=scheduled_date,
                    start_time=start,
                    end_time=end,
                    status=slot[3] if len(slot) > 3 else "upcoming",
                    created_by=owner,
                )
            )
        self.db.commit()
        self.db.refresh(row)
        return row

    def invoice(self, client, job, amount=15000.0, status="pending", owner="admin-uid", **kw):
        row = Invoice(
            invoice_number=kw.pop("invoice_number", f"INV-000{job.id}-001"),
            client_id=client.id,
            total_amount=amount,
            status=status,
            due_date=kw.pop("due_date", datetime(2030, 1, 1)),
            created_by=owner,
            **kw,
        )
        row.items.append(
            InvoiceItem(job_id=job.id, description=job.title, quantity=1, rate=amount, amount=amount)
        )
        self.db.add(row)
        self.db.commit()
        return row


@pytest.fixture
def make(db):
    return Factory(db)


@pytest.fixture
def broadcast_day():
    return date(2024, 5, 1)

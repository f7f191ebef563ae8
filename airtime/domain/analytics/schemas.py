"""Dashboard and analytics response models"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel

AnalyticsPeriod = Literal["week", "month", "quarter", "year"]


class RecentJob(BaseModel):
    id: int
    title: str
    client_name: Optional[str] = None
    status: str
    rate: float
    created_at: Optional[datetime] = None


class NextSchedule(BaseModel):
    id: int
    job_id: int
    job_title: Optional[str] = None
    client_name: Optional[str] = None
    scheduled_date: date
    start_time: str
    end_time: str
    status: str


class DashboardStats(BaseModel):
    total_revenue: float
    total_jobs: int
    active_jobs: int
    upcoming_schedules: int
    recent_jobs: list[RecentJob] = []
    next_schedules: list[NextSchedule] = []


class MonthlyRevenue(BaseModel):
    month: str
    amount: float


class ClientRevenue(BaseModel):
    client: str
    revenue: float


class StatusCount(BaseModel):
    status: str
    count: int


class AnalyticsReport(BaseModel):
    period: AnalyticsPeriod
    since: date
    total_revenue: float = 0
    total_jobs: int = 0
    completed_jobs: int = 0
    pending_invoices: int = 0
    revenue_by_month: list[MonthlyRevenue] = []
    top_clients: list[ClientRevenue] = []
    jobs_by_status: list[StatusCount] = []
    average_job_value: float = 0
    completion_rate: float = 0
    payment_rate: float = 0

"""Job domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...services.slots import MAX_SLOT_MINUTES, parse_duration_minutes
from ...shared.validators import validate_clock

JobStatus = Literal["scheduled", "in_progress", "completed", "cancelled"]


def _check_duration(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    minutes = parse_duration_minutes(v)
    if not minutes:
        raise ValueError("Duration must look like '30 sec' or '2 min'")
    if minutes >= MAX_SLOT_MINUTES:
        raise ValueError("Duration must be shorter than a day")
    return v.strip()


class JobCreate(BaseModel):
    """Schema for booking a job and its airtime slots"""

    title: str = Field(min_length=1)
    client_id: int
    duration: str
    air_time: str
    rate: float = Field(ge=0)
    description: Optional[str] = None
    status: JobStatus = "scheduled"
    schedule_dates: list[date] = Field(min_length=1)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _check_duration(v)

    @field_validator("air_time")
    @classmethod
    def validate_air_time(cls, v):
        return validate_clock(v)

    @field_validator("schedule_dates")
    @classmethod
    def unique_dates(cls, v):
        return sorted(set(v))


class JobUpdate(BaseModel):
    title: Optional[str] = None
    client_id: Optional[int] = None
    duration: Optional[str] = None
    air_time: Optional[str] = None
    rate: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    status: Optional[JobStatus] = None

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _check_duration(v)

    @field_validator("air_time")
    @classmethod
    def validate_air_time(cls, v):
        return validate_clock(v)


class JobScheduleSummary(BaseModel):
    id: int
    scheduled_date: date
    start_time: str
    end_time: str
    status: str

    class Config:
        from_attributes = True


class JobResponse(BaseModel):
    id: int
    title: str
    client_id: int
    client_name: Optional[str] = None
    duration: str
    air_time: str
    rate: float
    repeat_days: list[str] = []
    description: Optional[str] = None
    status: str
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    schedules: list[JobScheduleSummary] = []


class ScheduleFailure(BaseModel):
    date: date
    error: str


class JobCreateResponse(BaseModel):
    job: JobResponse
    schedules_created: int
    schedule_errors: list[ScheduleFailure] = []
    message: str

"""Schedule domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_clock

ScheduleStatus = Literal["upcoming", "live", "completed", "cancelled"]


class ScheduleCreate(BaseModel):
    """Schema for adding a single airtime slot to a job"""

    job_id: int
    scheduled_date: date
    start_time: Optional[str] = None  # defaults to the job's air time
    end_time: Optional[str] = None  # defaults to start + job duration
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_clock(cls, v):
        return validate_clock(v)


class ScheduleUpdate(BaseModel):
    scheduled_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: Optional[ScheduleStatus] = None
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_clock(cls, v):
        return validate_clock(v)


class ManualStatusChange(BaseModel):
    status: Literal["completed", "in_progress"]


class ScheduleResponse(BaseModel):
    id: int
    job_id: int
    job_title: Optional[str] = None
    job_status: Optional[str] = None
    client_name: Optional[str] = None
    scheduled_date: date
    start_time: str
    end_time: str
    status: str
    notes: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

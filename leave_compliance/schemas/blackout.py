"""
Blackout period schemas
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from leave_compliance.schemas.common import PaginationOut
from leave_compliance.utils.datetime_utils import iso_8601_utc


class BlackoutPeriodCreate(BaseModel):
    """Schema for creating a blackout period. Omitted scope fields match every request."""
    name: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    leave_type_id: Optional[int] = Field(None, description="Limit to one leave type")
    department_id: Optional[int] = Field(None, description="Limit to one department")
    reason: Optional[str] = Field(None, max_length=500)


class BlackoutPeriodUpdate(BaseModel):
    """Schema for updating a blackout period (partial)"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    leave_type_id: Optional[int] = None
    department_id: Optional[int] = None
    reason: Optional[str] = Field(None, max_length=500)


class BlackoutPeriodOut(BaseModel):
    id: int
    name: str
    start_date: date
    end_date: date
    leave_type_id: Optional[int] = None
    department_id: Optional[int] = None
    reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_8601_utc(dt)


class BlackoutPeriodListResponse(BaseModel):
    periods: List[BlackoutPeriodOut]
    pagination: PaginationOut

"""
Holiday calendar schemas
"""
from datetime import date as date_type, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from leave_compliance.utils.datetime_utils import iso_8601_utc

MIN_BULK_YEAR = 2020
MAX_BULK_YEAR = 2030


class HolidayCreate(BaseModel):
    """Schema for creating a holiday"""
    date: date_type = Field(..., description="Holiday date")
    name: str = Field(..., min_length=1, max_length=200, description="Holiday name")
    is_half_day: bool = Field(False, description="Half-day holiday (still excluded from leave day counts)")
    country: Optional[str] = Field(None, max_length=100)
    region: Optional[str] = Field(None, max_length=100)


class HolidayBulkItem(BaseModel):
    date: date_type
    name: str = Field(..., min_length=1, max_length=200)
    is_half_day: bool = False


class HolidayBulkCreate(BaseModel):
    """Schema for importing a year of holidays at once"""
    year: int = Field(..., ge=MIN_BULK_YEAR, le=MAX_BULK_YEAR, description="Calendar year every date must fall in")
    country: Optional[str] = Field(None, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    holidays: List[HolidayBulkItem] = Field(..., min_length=1)


class HolidayOut(BaseModel):
    """Schema for holiday output"""
    id: int
    date: date_type
    name: str
    is_half_day: bool
    country: Optional[str] = None
    region: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_8601_utc(dt)


class HolidayBulkResult(BaseModel):
    year: int
    created: int
    holidays: List[HolidayOut]

"""
Leave type schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from leave_compliance.utils.datetime_utils import iso_8601_utc

CODE_PATTERN = r"^[A-Z_]+$"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class LeaveTypeCreate(BaseModel):
    """Schema for creating a leave type"""
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    code: str = Field(..., min_length=1, max_length=20, pattern=CODE_PATTERN, description="Upper-case code, e.g. PTO")
    requires_approval: bool = Field(True, description="Requests need a manager decision")
    requires_certificate: bool = Field(False, description="Requests need a supporting document")
    allow_negative_balance: bool = Field(False, description="Allow the remaining balance to go below zero")
    max_balance: Optional[float] = Field(None, ge=0, description="Cap on balance_days")
    minimum_entitlement_days: Optional[float] = Field(None, ge=0, description="Days that must stay reserved until period end")
    enforce_minimum_entitlement: bool = Field(False, description="Enforce minimum_entitlement_days on new requests")
    color: str = Field("#3B82F6", pattern=COLOR_PATTERN, description="Calendar color (#RRGGBB)")


class LeaveTypeUpdate(BaseModel):
    """Schema for updating a leave type (partial)"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, min_length=1, max_length=20, pattern=CODE_PATTERN)
    requires_approval: Optional[bool] = None
    requires_certificate: Optional[bool] = None
    allow_negative_balance: Optional[bool] = None
    max_balance: Optional[float] = Field(None, ge=0)
    minimum_entitlement_days: Optional[float] = Field(None, ge=0)
    enforce_minimum_entitlement: Optional[bool] = None
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
    is_active: Optional[bool] = None


class LeaveTypeOut(BaseModel):
    """Schema for leave type output"""
    id: int
    name: str
    code: str
    requires_approval: bool
    requires_certificate: bool
    allow_negative_balance: bool
    max_balance: Optional[float] = None
    minimum_entitlement_days: Optional[float] = None
    enforce_minimum_entitlement: bool
    color: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt: Optional[datetime]) -> Optional[str]:
        return iso_8601_utc(dt)

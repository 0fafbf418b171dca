"""
Leave request schemas
"""
from datetime import date, datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from leave_compliance.models.leave import LeaveRequestStatus, LeaveAuditAction
from leave_compliance.schemas.common import PaginationOut
from leave_compliance.utils.datetime_utils import iso_8601_utc


class LeaveRequestCreate(BaseModel):
    """Schema for submitting a leave request"""
    leave_type_id: int = Field(..., description="Leave type to draw from")
    start_date: date = Field(..., description="First day of leave")
    end_date: date = Field(..., description="Last day of leave")
    half_day_start: bool = Field(False, description="Only the second half of the first day")
    half_day_end: bool = Field(False, description="Only the first half of the last day")
    note: Optional[str] = Field(None, max_length=1000)
    attachment_path: Optional[str] = Field(None, max_length=500)


class LeaveRequestUpdate(BaseModel):
    """Schema for modifying a pending request (partial)"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    half_day_start: Optional[bool] = None
    half_day_end: Optional[bool] = None
    note: Optional[str] = Field(None, max_length=1000)
    attachment_path: Optional[str] = Field(None, max_length=500)


class LeaveDecisionRequest(BaseModel):
    """Approve or deny a pending request. Denials need a reason."""
    decision: Literal["approve", "deny"]
    reason: Optional[str] = Field(None, max_length=500, description="Required when denying")


class EmployeeBrief(BaseModel):
    id: int
    name: str
    emp_code: str
    department_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class LeaveTypeBrief(BaseModel):
    id: int
    name: str
    code: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class LeaveRequestOut(BaseModel):
    id: int
    employee_id: int
    employee: Optional[EmployeeBrief] = None
    leave_type_id: int
    leave_type: Optional[LeaveTypeBrief] = None
    start_date: date
    end_date: date
    half_day_start: bool
    half_day_end: bool
    days_count: Optional[float] = None
    status: LeaveRequestStatus
    note: Optional[str] = None
    attachment_path: Optional[str] = None
    denial_reason: Optional[str] = None
    approver_id: Optional[int] = None
    decided_at: Optional[datetime] = None
    cancelled_by_id: Optional[int] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("decided_at", "cancelled_at", "created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt: Optional[datetime]) -> Optional[str]:
        return iso_8601_utc(dt)


class LeaveRequestListResponse(BaseModel):
    requests: List[LeaveRequestOut]
    pagination: PaginationOut


class LeaveDecisionResult(BaseModel):
    request: LeaveRequestOut
    message: Optional[str] = None


class LeaveRequestAuditOut(BaseModel):
    id: int
    request_id: int
    changed_by: int
    action: LeaveAuditAction
    old_values: Optional[dict] = None
    new_values: Optional[dict] = None
    reason: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_8601_utc(dt)

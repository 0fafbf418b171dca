"""
Team calendar schemas
"""
from datetime import date
from typing import Optional, List, Literal
from pydantic import BaseModel
from leave_compliance.models.leave import LeaveRequestStatus


class CalendarEvent(BaseModel):
    """A leave request (``request-{id}``) or a holiday (``holiday-{id}``) on the calendar"""
    id: str
    type: Literal["leave", "holiday"]
    title: str
    start_date: date
    end_date: date
    employee_id: Optional[int] = None
    employee_name: Optional[str] = None
    leave_type_id: Optional[int] = None
    leave_type_name: Optional[str] = None
    color: Optional[str] = None
    status: Optional[LeaveRequestStatus] = None
    is_half_day: bool = False
    days_count: Optional[float] = None
    notes: Optional[str] = None


class TeamCalendarSummary(BaseModel):
    total_requests: int
    pending_requests: int
    approved_requests: int
    holidays: int


class TeamCalendarResponse(BaseModel):
    events: List[CalendarEvent]
    holidays: List[CalendarEvent]
    summary: TeamCalendarSummary

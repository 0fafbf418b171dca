"""
Team calendar service - leave requests and holidays in a date window
"""
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status

from leave_compliance.core.config import settings
from leave_compliance.models.employee import Employee
from leave_compliance.models.leave import ACTIVE_REQUEST_STATUSES, LeaveRequest, LeaveRequestStatus
from leave_compliance.services.holiday_service import get_holidays_in_range
from leave_compliance.services.leave_request_service import visible_employee_ids


def _leave_event(req: LeaveRequest) -> Dict[str, Any]:
    employee_name = req.employee.name if req.employee else None
    leave_type = req.leave_type
    return {
        "id": f"request-{req.id}",
        "type": "leave",
        "title": f"{employee_name} - {leave_type.name}" if leave_type else employee_name,
        "start_date": req.start_date,
        "end_date": req.end_date,
        "employee_id": req.employee_id,
        "employee_name": employee_name,
        "leave_type_id": req.leave_type_id,
        "leave_type_name": leave_type.name if leave_type else None,
        "color": leave_type.color if leave_type else None,
        "status": req.status,
        "is_half_day": bool(req.half_day_start or req.half_day_end),
        "days_count": float(req.days_count) if req.days_count is not None else None,
        "notes": req.note,
    }


def _holiday_event(holiday) -> Dict[str, Any]:
    return {
        "id": f"holiday-{holiday.id}",
        "type": "holiday",
        "title": holiday.name,
        "start_date": holiday.date,
        "end_date": holiday.date,
        "is_half_day": holiday.is_half_day,
    }


def get_team_calendar(
    db: Session,
    current_user: Employee,
    start_date: date,
    end_date: date,
    employee_ids: Optional[List[int]] = None,
    department_id: Optional[int] = None,
    leave_type_ids: Optional[List[int]] = None,
    statuses: Optional[List[LeaveRequestStatus]] = None,
    include_holidays: bool = True
) -> Dict[str, Any]:
    """
    Build the team calendar for [start_date, end_date]

    Args:
        db: Database session
        current_user: Viewer; non tenant-wide roles only see their reporting tree
        start_date: Window start (inclusive)
        end_date: Window end (inclusive)
        employee_ids: Restrict to these employees
        department_id: Restrict to one department
        leave_type_ids: Restrict to these leave types
        statuses: Request statuses to show (defaults to pending and approved)
        include_holidays: Add the tenant's holidays in the window

    Returns:
        Dict with events, holidays and summary counts

    Raises:
        HTTPException: 400 if the window is inverted or longer than a year
    """
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be after start date"
        )
    max_days = settings.TEAM_CALENDAR_MAX_DAYS
    if (end_date - start_date).days >= max_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range cannot exceed {max_days} days"
        )

    query = db.query(LeaveRequest).options(
        joinedload(LeaveRequest.employee),
        joinedload(LeaveRequest.leave_type),
    ).join(Employee, LeaveRequest.employee_id == Employee.id).filter(
        LeaveRequest.tenant_id == current_user.tenant_id,
        LeaveRequest.end_date >= start_date,
        LeaveRequest.start_date <= end_date,
        LeaveRequest.status.in_(statuses or list(ACTIVE_REQUEST_STATUSES)),
    )

    visible = visible_employee_ids(db, current_user)
    if visible is not None:
        query = query.filter(LeaveRequest.employee_id.in_(visible))
    if employee_ids:
        query = query.filter(LeaveRequest.employee_id.in_(employee_ids))
    if department_id is not None:
        query = query.filter(Employee.department_id == department_id)
    if leave_type_ids:
        query = query.filter(LeaveRequest.leave_type_id.in_(leave_type_ids))

    requests = query.order_by(LeaveRequest.start_date, LeaveRequest.id).all()
    events = [_leave_event(r) for r in requests]

    holidays = []
    if include_holidays:
        holidays = [_holiday_event(h) for h in get_holidays_in_range(db, current_user.tenant_id, start_date, end_date)]

    return {
        "events": events,
        "holidays": holidays,
        "summary": {
            "total_requests": len(requests),
            "pending_requests": sum(1 for r in requests if r.status == LeaveRequestStatus.PENDING),
            "approved_requests": sum(1 for r in requests if r.status == LeaveRequestStatus.APPROVED),
            "holidays": len(holidays),
        },
    }

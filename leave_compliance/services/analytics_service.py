"""
Leave analytics - approved leave aggregated by period and group
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status

from leave_compliance.models.employee import Employee
from leave_compliance.models.leave import LeaveRequest, LeaveRequestStatus
from leave_compliance.services.leave_request_service import visible_employee_ids
from leave_compliance.utils.datetime_utils import today_utc

logger = logging.getLogger(__name__)

NO_DEPARTMENT = "No Department"


def default_window(start_date: Optional[date], end_date: Optional[date]) -> Tuple[date, date]:
    """Missing bounds default to Jan 1 of the current year and today"""
    today = today_utc()
    return start_date or date(today.year, 1, 1), end_date or today


def _validate_window(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be after start date"
        )


def _scoped_employees(db: Session, current_user: Employee):
    query = db.query(Employee).filter(Employee.tenant_id == current_user.tenant_id)
    visible = visible_employee_ids(db, current_user)
    if visible is not None:
        query = query.filter(Employee.id.in_(visible))
    return query


def _request_query(
    db: Session,
    current_user: Employee,
    start_date: date,
    end_date: date,
    employee_id: Optional[int] = None,
    department_id: Optional[int] = None
):
    """Approved requests whose start date falls in [start_date, end_date], scoped to the viewer"""
    query = db.query(LeaveRequest).options(
        joinedload(LeaveRequest.employee).joinedload(Employee.department),
        joinedload(LeaveRequest.leave_type),
    ).join(Employee, LeaveRequest.employee_id == Employee.id).filter(
        LeaveRequest.tenant_id == current_user.tenant_id,
        LeaveRequest.status == LeaveRequestStatus.APPROVED,
        LeaveRequest.start_date >= start_date,
        LeaveRequest.start_date <= end_date,
    )

    visible = visible_employee_ids(db, current_user)
    if visible is not None:
        query = query.filter(LeaveRequest.employee_id.in_(visible))
    if employee_id is not None:
        query = query.filter(LeaveRequest.employee_id == employee_id)
    if department_id is not None:
        query = query.filter(Employee.department_id == department_id)
    return query


def _days(req: LeaveRequest) -> Decimal:
    return req.days_count if req.days_count is not None else Decimal("0")


def _leave_type_usage(requests: List[LeaveRequest]) -> List[Dict[str, Any]]:
    usage: Dict[int, Dict[str, Any]] = {}
    for req in requests:
        row = usage.setdefault(req.leave_type_id, {
            "leave_type_id": req.leave_type_id,
            "leave_type_name": req.leave_type.name,
            "days": Decimal("0"),
            "requests": 0,
        })
        row["days"] += _days(req)
        row["requests"] += 1
    rows = sorted(usage.values(), key=lambda r: (r["leave_type_name"], r["leave_type_id"]))
    for row in rows:
        row["days"] = float(row["days"])
    return rows


def _group(requests: List[LeaveRequest], key) -> Dict[Any, List[LeaveRequest]]:
    groups: Dict[Any, List[LeaveRequest]] = {}
    for req in requests:
        groups.setdefault(key(req), []).append(req)
    return groups


def _totals(requests: List[LeaveRequest]) -> Dict[str, Any]:
    return {
        "total_days": float(sum((_days(r) for r in requests), Decimal("0"))),
        "total_requests": len(requests),
    }


def get_utilization(
    db: Session,
    current_user: Employee,
    start_date: date,
    end_date: date,
    employee_id: Optional[int] = None,
    department_id: Optional[int] = None,
    group_by: str = "employee"
) -> Dict[str, Any]:
    """
    Approved leave days per employee, department or leave type

    Args:
        db: Database session
        current_user: Viewer; non tenant-wide roles only see their reporting tree
        start_date: Window start (inclusive, matched against request start dates)
        end_date: Window end (inclusive)
        employee_id: Restrict to one employee
        department_id: Restrict to one department
        group_by: "employee", "department" or "leave_type"

    Returns:
        Dict with the utilization rows and the grouping used

    Raises:
        HTTPException: 400 if the window is inverted
    """
    _validate_window(start_date, end_date)
    requests = _request_query(
        db, current_user, start_date, end_date,
        employee_id=employee_id, department_id=department_id,
    ).order_by(LeaveRequest.start_date, LeaveRequest.id).all()

    rows: List[Dict[str, Any]] = []
    if group_by == "department":
        for dept_id, group in _group(requests, lambda r: r.employee.department_id).items():
            department = group[0].employee.department
            rows.append({
                "department_id": dept_id,
                "department_name": department.name if department else NO_DEPARTMENT,
                **_totals(group),
                "employee_count": len({r.employee_id for r in group}),
                "leave_types": _leave_type_usage(group),
            })
        rows.sort(key=lambda r: (r["department_id"] is None, r["department_name"]))
    elif group_by == "leave_type":
        for type_id, group in _group(requests, lambda r: r.leave_type_id).items():
            leave_type = group[0].leave_type
            rows.append({
                "leave_type_id": type_id,
                "leave_type_name": leave_type.name,
                "leave_type_code": leave_type.code,
                **_totals(group),
                "employee_count": len({r.employee_id for r in group}),
            })
        rows.sort(key=lambda r: (r["leave_type_name"], r["leave_type_id"]))
    else:
        for emp_id, group in _group(requests, lambda r: r.employee_id).items():
            employee = group[0].employee
            rows.append({
                "employee_id": emp_id,
                "employee_name": employee.name,
                "department_id": employee.department_id,
                "department_name": employee.department.name if employee.department else NO_DEPARTMENT,
                **_totals(group),
                "leave_types": _leave_type_usage(group),
            })
        rows.sort(key=lambda r: (r["employee_name"], r["employee_id"]))

    logger.debug(
        "utilization: tenant_id=%s viewer_id=%s group_by=%s window=%s..%s requests=%s",
        current_user.tenant_id, current_user.id, group_by, start_date, end_date, len(requests),
    )
    return {"utilization": rows, "group_by": group_by}


def period_bucket(day: date, granularity: str) -> Tuple[date, str]:
    """First day and label of the month, quarter or year containing ``day``"""
    if granularity == "year":
        return date(day.year, 1, 1), str(day.year)
    if granularity == "quarter":
        quarter = (day.month - 1) // 3 + 1
        return date(day.year, 3 * quarter - 2, 1), f"Q{quarter} {day.year}"
    return date(day.year, day.month, 1), f"{day.year}-{day.month:02d}"


def get_trends(
    db: Session,
    current_user: Employee,
    start_date: date,
    end_date: date,
    granularity: str = "month"
) -> Dict[str, Any]:
    """
    Approved leave per period and leave type, bucketed by request start date

    Raises:
        HTTPException: 400 if the window is inverted
    """
    _validate_window(start_date, end_date)
    requests = _request_query(db, current_user, start_date, end_date).all()

    buckets = _group(requests, lambda r: (period_bucket(r.start_date, granularity), r.leave_type_id))
    trends = []
    for ((period_start, label), type_id), group in buckets.items():
        trends.append({
            "period": label,
            "period_start": period_start,
            "leave_type_id": type_id,
            "leave_type_name": group[0].leave_type.name,
            **_totals(group),
            "employee_count": len({r.employee_id for r in group}),
        })
    trends.sort(key=lambda t: (t["period_start"], t["leave_type_name"], t["leave_type_id"]))
    return {"trends": trends, "granularity": granularity}


def get_summary(
    db: Session,
    current_user: Employee,
    start_date: date,
    end_date: date
) -> Dict[str, Any]:
    """
    Headline numbers for the window.

    ``pending_requests`` counts every request awaiting a decision, whatever
    its dates; the averages divide by active employees in the viewer's scope.
    """
    _validate_window(start_date, end_date)
    approved = _request_query(db, current_user, start_date, end_date).all()

    pending = db.query(LeaveRequest).filter(
        LeaveRequest.tenant_id == current_user.tenant_id,
        LeaveRequest.status == LeaveRequestStatus.PENDING,
    )
    visible = visible_employee_ids(db, current_user)
    if visible is not None:
        pending = pending.filter(LeaveRequest.employee_id.in_(visible))

    employee_count = _scoped_employees(db, current_user).filter(Employee.active == True).count()
    total_days = _totals(approved)["total_days"]

    breakdown = []
    for type_id, group in _group(approved, lambda r: r.leave_type_id).items():
        breakdown.append({
            "leave_type_id": type_id,
            "leave_type_name": group[0].leave_type.name,
            **_totals(group),
        })
    breakdown.sort(key=lambda b: (-b["total_days"], b["leave_type_name"]))

    return {
        "summary": {
            "total_days_taken": total_days,
            "average_per_employee": round(total_days / employee_count, 2) if employee_count else 0.0,
            "pending_requests": pending.count(),
            "total_employees": employee_count,
            "leave_type_breakdown": breakdown,
        },
        "period": {"start_date": start_date, "end_date": end_date},
    }

"""
Leave request service - submission, modification, cancellation and decisions.

Submission and date changes run the compliance evaluator; balance changes on
approval and cancellation go through balance_service.apply_adjustment.
Denied and cancelled requests are terminal.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status

from leave_compliance.core.errors import ComplianceRejected
from leave_compliance.core.permissions import is_tenant_wide
from leave_compliance.models.employee import Employee
from leave_compliance.models.leave import (
    ACTIVE_REQUEST_STATUSES,
    LeaveAuditAction,
    LeaveRequest,
    LeaveRequestAudit,
    LeaveRequestStatus,
    LeaveTransactionAction,
)
from leave_compliance.schemas.leave_request import (
    LeaveDecisionRequest,
    LeaveRequestCreate,
    LeaveRequestUpdate,
)
from leave_compliance.services.audit_service import add_request_audit
from leave_compliance.services.balance_service import apply_adjustment, get_active_balance
from leave_compliance.services.blackout_service import find_conflicting_periods
from leave_compliance.services.compliance import LeaveRequestDraft, evaluate_leave_request
from leave_compliance.services.holiday_service import get_holidays_in_range
from leave_compliance.services.leave_type_service import get_leave_type
from leave_compliance.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

OVERLAPPING_REQUEST = "OVERLAPPING_REQUEST"


def get_subordinate_ids(db: Session, manager_id: int) -> List[int]:
    """
    All direct and indirect reports of a manager (iterative walk of manager_id).

    Args:
        db: Database session
        manager_id: Root of the reporting tree

    Returns:
        Employee IDs below manager_id, excluding manager_id itself
    """
    subordinate_ids: List[int] = []
    frontier = [manager_id]
    seen = {manager_id}
    while frontier:
        rows = db.query(Employee.id).filter(Employee.manager_id.in_(frontier)).all()
        frontier = []
        for (emp_id,) in rows:
            if emp_id in seen:
                continue
            seen.add(emp_id)
            subordinate_ids.append(emp_id)
            frontier.append(emp_id)
    return subordinate_ids


def visible_employee_ids(db: Session, user: Employee) -> Optional[List[int]]:
    """None means the whole tenant; otherwise the user plus their reporting tree"""
    if is_tenant_wide(user.role):
        return None
    return [user.id] + get_subordinate_ids(db, user.id)


def _snapshot(req: LeaveRequest) -> Dict[str, Any]:
    return {
        "start_date": req.start_date,
        "end_date": req.end_date,
        "half_day_start": req.half_day_start,
        "half_day_end": req.half_day_end,
        "days_count": req.days_count,
        "status": req.status,
        "note": req.note,
        "attachment_path": req.attachment_path,
    }


def get_request_or_404(db: Session, tenant_id: int, request_id: int) -> LeaveRequest:
    req = db.query(LeaveRequest).options(
        joinedload(LeaveRequest.employee),
        joinedload(LeaveRequest.leave_type),
    ).filter(
        LeaveRequest.id == request_id,
        LeaveRequest.tenant_id == tenant_id,
    ).first()
    if not req:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Leave request with id {request_id} not found"
        )
    return req


def check_overlap(
    db: Session,
    tenant_id: int,
    employee_id: int,
    start_date: date,
    end_date: date,
    exclude_request_id: Optional[int] = None
) -> None:
    """
    Reject when the range intersects one of the employee's pending or approved requests.

    Raises:
        HTTPException: 400 with error_code OVERLAPPING_REQUEST and the overlapping rows
    """
    query = db.query(LeaveRequest).filter(
        LeaveRequest.tenant_id == tenant_id,
        LeaveRequest.employee_id == employee_id,
        LeaveRequest.status.in_(ACTIVE_REQUEST_STATUSES),
        LeaveRequest.end_date >= start_date,
        LeaveRequest.start_date <= end_date,
    )
    if exclude_request_id is not None:
        query = query.filter(LeaveRequest.id != exclude_request_id)

    overlapping = query.order_by(LeaveRequest.start_date).all()
    if overlapping:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "You already have a leave request for these dates",
                "error_code": OVERLAPPING_REQUEST,
                "overlapping_requests": [
                    {
                        "id": r.id,
                        "start_date": r.start_date,
                        "end_date": r.end_date,
                        "status": r.status,
                    }
                    for r in overlapping
                ],
            },
        )


def _validate_dates(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be on or after start date"
        )


def _run_compliance(
    db: Session,
    employee: Employee,
    leave_type_id: int,
    start_date: date,
    end_date: date,
    half_day_start: bool,
    half_day_end: bool,
):
    """Load everything the evaluator needs, evaluate, and raise on rejection."""
    tenant_id = employee.tenant_id
    draft = LeaveRequestDraft(
        employee_id=employee.id,
        leave_type_id=leave_type_id,
        start_date=start_date,
        end_date=end_date,
        half_day_start=half_day_start,
        half_day_end=half_day_end,
        department_id=employee.department_id,
    )
    leave_type = get_leave_type(db, tenant_id, leave_type_id)
    balance = get_active_balance(db, tenant_id, employee.id, leave_type_id, start_date)
    blackouts = find_conflicting_periods(
        db, tenant_id, start_date, end_date, leave_type_id, employee.department_id
    )
    holidays = get_holidays_in_range(db, tenant_id, start_date, end_date)

    verdict = evaluate_leave_request(draft, leave_type, balance, blackouts, holidays)
    if not verdict.valid:
        logger.info(
            "leave compliance rejection: employee_id=%s leave_type_id=%s start=%s end=%s error_code=%s",
            employee.id, leave_type_id, start_date, end_date, verdict.error_code,
        )
        raise ComplianceRejected(verdict)
    return verdict, leave_type, balance


def create_leave_request(
    db: Session,
    employee: Employee,
    data: LeaveRequestCreate,
    ip_address: Optional[str] = None
) -> LeaveRequest:
    """
    Submit a leave request for the current employee

    Args:
        db: Database session
        employee: Requesting employee (current user)
        data: Request payload
        ip_address: Client address for the audit trail

    Returns:
        Created LeaveRequest (approved immediately when the type needs no approval)

    Raises:
        HTTPException: 400 on bad dates or overlap, 409 if auto-approval cannot deduct
        ComplianceRejected: If the compliance evaluator rejects the request
    """
    _validate_dates(data.start_date, data.end_date)
    check_overlap(db, employee.tenant_id, employee.id, data.start_date, data.end_date)

    verdict, leave_type, balance = _run_compliance(
        db, employee, data.leave_type_id, data.start_date, data.end_date,
        data.half_day_start, data.half_day_end,
    )

    # Explicitly set created_at/updated_at to avoid SQLite issues with server_default
    now = now_utc()
    req = LeaveRequest(
        tenant_id=employee.tenant_id,
        employee_id=employee.id,
        leave_type_id=data.leave_type_id,
        start_date=data.start_date,
        end_date=data.end_date,
        half_day_start=data.half_day_start,
        half_day_end=data.half_day_end,
        days_count=verdict.requested_days,
        status=LeaveRequestStatus.PENDING,
        note=data.note,
        attachment_path=data.attachment_path,
        created_at=now,
        updated_at=now,
    )
    db.add(req)
    db.flush()
    add_request_audit(
        db, req.id, employee.id, LeaveAuditAction.CREATED,
        new_values=_snapshot(req), ip_address=ip_address,
    )

    if not leave_type.requires_approval:
        if verdict.requested_days > 0:
            apply_adjustment(
                db, balance, -verdict.requested_days, LeaveTransactionAction.APPROVE_DEDUCT,
                "Auto-approved: leave type does not require approval", employee.id,
                leave_request_id=req.id,
            )
        req.status = LeaveRequestStatus.APPROVED
        req.decided_at = now
        logger.info(
            "leave status transition: leave_request_id=%s before=pending after=approved action=auto_approve",
            req.id,
        )
        add_request_audit(
            db, req.id, employee.id, LeaveAuditAction.APPROVED,
            old_values={"status": LeaveRequestStatus.PENDING},
            new_values={"status": LeaveRequestStatus.APPROVED},
            reason="Leave type does not require approval",
            ip_address=ip_address,
        )

    db.commit()
    db.refresh(req)
    logger.info(
        "leave request created: leave_request_id=%s employee_id=%s days=%s status=%s",
        req.id, employee.id, verdict.requested_days, req.status.value,
    )
    return req


def update_leave_request(
    db: Session,
    employee: Employee,
    request_id: int,
    data: LeaveRequestUpdate,
    ip_address: Optional[str] = None
) -> LeaveRequest:
    """
    Modify the caller's own pending request. Date or half-day changes recompute
    the day count and re-run the overlap and compliance checks.

    Raises:
        HTTPException: 403 if not the requester, 400 if not pending / bad dates / overlap
        ComplianceRejected: If the new dates fail compliance
    """
    req = get_request_or_404(db, employee.tenant_id, request_id)
    if req.employee_id != employee.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the requester can modify this leave request"
        )
    if req.status != LeaveRequestStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only pending requests can be modified (status is {req.status.value})"
        )

    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not changes:
        return req

    old_values = _snapshot(req)
    start_date = changes.get("start_date", req.start_date)
    end_date = changes.get("end_date", req.end_date)
    half_day_start = changes.get("half_day_start", req.half_day_start)
    half_day_end = changes.get("half_day_end", req.half_day_end)
    _validate_dates(start_date, end_date)

    dates_changed = (
        start_date != req.start_date
        or end_date != req.end_date
        or half_day_start != req.half_day_start
        or half_day_end != req.half_day_end
    )
    if dates_changed:
        check_overlap(db, employee.tenant_id, employee.id, start_date, end_date, exclude_request_id=req.id)
        verdict, _, _ = _run_compliance(
            db, employee, req.leave_type_id, start_date, end_date, half_day_start, half_day_end,
        )
        req.days_count = verdict.requested_days

    for field, value in changes.items():
        setattr(req, field, value)
    req.updated_at = now_utc()

    add_request_audit(
        db, req.id, employee.id, LeaveAuditAction.MODIFIED,
        old_values=old_values, new_values=_snapshot(req), ip_address=ip_address,
    )
    db.commit()
    db.refresh(req)
    return req


def cancel_leave_request(
    db: Session,
    employee: Employee,
    request_id: int,
    reason: Optional[str] = None,
    ip_address: Optional[str] = None
) -> LeaveRequest:
    """
    Cancel the caller's own pending or approved request. Approved days are re-credited.

    Raises:
        HTTPException: 403 if not the requester, 400 if already cancelled or denied
    """
    req = get_request_or_404(db, employee.tenant_id, request_id)
    if req.employee_id != employee.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the requester can cancel this leave request"
        )
    if req.status == LeaveRequestStatus.CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Leave request is already cancelled"
        )
    if req.status == LeaveRequestStatus.DENIED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot cancel a denied request"
        )

    before_status = req.status
    days = float(req.days_count or 0)
    if before_status == LeaveRequestStatus.APPROVED and days > 0:
        balance = get_active_balance(db, req.tenant_id, req.employee_id, req.leave_type_id, req.start_date)
        if balance:
            apply_adjustment(
                db, balance, days, LeaveTransactionAction.CANCEL_RECREDIT,
                reason or "Leave request cancelled", employee.id, leave_request_id=req.id,
            )
        else:
            logger.warning(
                "no balance row to re-credit on cancel: leave_request_id=%s leave_type_id=%s",
                req.id, req.leave_type_id,
            )

    now = now_utc()
    req.status = LeaveRequestStatus.CANCELLED
    req.cancelled_by_id = employee.id
    req.cancelled_at = now
    req.updated_at = now
    logger.info(
        "leave status transition: leave_request_id=%s before=%s after=cancelled action=cancel",
        req.id, before_status.value,
    )
    add_request_audit(
        db, req.id, employee.id, LeaveAuditAction.CANCELLED,
        old_values={"status": before_status},
        new_values={"status": LeaveRequestStatus.CANCELLED},
        reason=reason, ip_address=ip_address,
    )
    db.commit()
    db.refresh(req)
    return req


def _ensure_can_decide(db: Session, approver: Employee, req: LeaveRequest) -> None:
    if req.employee_id == approver.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot approve or deny your own leave request"
        )
    if is_tenant_wide(approver.role):
        return
    if req.employee_id not in get_subordinate_ids(db, approver.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not authorized to decide this leave request"
        )


def decide_leave_request(
    db: Session,
    approver: Employee,
    request_id: int,
    decision: LeaveDecisionRequest,
    ip_address: Optional[str] = None
) -> Tuple[LeaveRequest, Optional[str]]:
    """
    Approve or deny a pending request

    Re-deciding to the state a request already holds is a no-op and returns a message.

    Returns:
        Tuple of (request, optional message)

    Raises:
        HTTPException: 400 for cancelled / non-pending requests or a deny without reason,
            403 for self-approval or requests outside the approver's team,
            409 if approval finds no balance row or the deduction is not allowed
    """
    req = get_request_or_404(db, approver.tenant_id, request_id)
    target = LeaveRequestStatus.APPROVED if decision.decision == "approve" else LeaveRequestStatus.DENIED

    if req.status == LeaveRequestStatus.CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot approve or deny a cancelled request"
        )
    if req.status == target:
        return req, f"Leave request is already {target.value}"
    if req.status != LeaveRequestStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot {decision.decision} a request with status {req.status.value}"
        )
    reason = decision.reason.strip() if decision.reason else None
    if target == LeaveRequestStatus.DENIED and not reason:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A reason is required when denying a leave request"
        )
    _ensure_can_decide(db, approver, req)

    if target == LeaveRequestStatus.APPROVED:
        balance = get_active_balance(db, req.tenant_id, req.employee_id, req.leave_type_id, req.start_date)
        if balance is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No leave balance record found for this leave type"
            )
        days = float(req.days_count or 0)
        if days > 0:
            apply_adjustment(
                db, balance, -days, LeaveTransactionAction.APPROVE_DEDUCT,
                reason or "Leave request approved", approver.id, leave_request_id=req.id,
            )
    else:
        req.denial_reason = reason

    now = now_utc()
    req.status = target
    req.approver_id = approver.id
    req.decided_at = now
    req.updated_at = now
    logger.info(
        "leave status transition: leave_request_id=%s before=pending after=%s action=%s",
        req.id, target.value, decision.decision,
    )
    add_request_audit(
        db, req.id, approver.id,
        LeaveAuditAction.APPROVED if target == LeaveRequestStatus.APPROVED else LeaveAuditAction.DENIED,
        old_values={"status": LeaveRequestStatus.PENDING},
        new_values={"status": target},
        reason=reason, ip_address=ip_address,
    )
    db.commit()
    db.refresh(req)
    return req, None


def list_leave_requests(
    db: Session,
    current_user: Employee,
    employee_id: Optional[int] = None,
    leave_type_id: Optional[int] = None,
    status_filter: Optional[LeaveRequestStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    year: Optional[int] = None,
    page: int = 1,
    page_size: int = 20
) -> Tuple[List[LeaveRequest], int]:
    """
    List leave requests visible to the current user, newest first.
    Tenant-wide roles see everyone; others see themselves and their reporting tree.

    Returns:
        Tuple of (page of requests, total count)
    """
    query = db.query(LeaveRequest).options(
        joinedload(LeaveRequest.employee),
        joinedload(LeaveRequest.leave_type),
    ).filter(LeaveRequest.tenant_id == current_user.tenant_id)

    visible = visible_employee_ids(db, current_user)
    if employee_id is not None:
        if visible is not None and employee_id not in visible:
            return [], 0
        query = query.filter(LeaveRequest.employee_id == employee_id)
    elif visible is not None:
        query = query.filter(LeaveRequest.employee_id.in_(visible))

    if leave_type_id is not None:
        query = query.filter(LeaveRequest.leave_type_id == leave_type_id)
    if status_filter is not None:
        query = query.filter(LeaveRequest.status == status_filter)
    if start_date:
        query = query.filter(LeaveRequest.end_date >= start_date)
    if end_date:
        query = query.filter(LeaveRequest.start_date <= end_date)
    if year:
        query = query.filter(
            LeaveRequest.end_date >= date(year, 1, 1),
            LeaveRequest.start_date <= date(year, 12, 31),
        )

    total = query.count()
    requests = query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).offset(
        (page - 1) * page_size
    ).limit(page_size).all()
    return requests, total


def list_pending_for_approver(db: Session, approver: Employee) -> List[LeaveRequest]:
    """
    Pending requests the approver may decide, oldest first. The approver's own
    requests are never included.
    """
    query = db.query(LeaveRequest).options(
        joinedload(LeaveRequest.employee),
        joinedload(LeaveRequest.leave_type),
    ).filter(
        LeaveRequest.tenant_id == approver.tenant_id,
        LeaveRequest.status == LeaveRequestStatus.PENDING,
        LeaveRequest.employee_id != approver.id,
    )
    if not is_tenant_wide(approver.role):
        subordinate_ids = get_subordinate_ids(db, approver.id)
        if not subordinate_ids:
            return []
        query = query.filter(LeaveRequest.employee_id.in_(subordinate_ids))
    return query.order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc()).all()


def list_request_audit(db: Session, tenant_id: int, request_id: int) -> List[LeaveRequestAudit]:
    """Audit trail of one request, newest first"""
    get_request_or_404(db, tenant_id, request_id)
    return db.query(LeaveRequestAudit).filter(
        LeaveRequestAudit.request_id == request_id
    ).order_by(LeaveRequestAudit.created_at.desc(), LeaveRequestAudit.id.desc()).all()

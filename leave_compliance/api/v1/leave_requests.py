"""
Leave request endpoints
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from leave_compliance.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from leave_compliance.core.deps import get_db, get_current_user, require_permission
from leave_compliance.core.permissions import APPROVE_REQUESTS
from leave_compliance.models.employee import Employee
from leave_compliance.models.leave import LeaveRequestStatus
from leave_compliance.schemas.common import PaginationOut
from leave_compliance.schemas.leave_request import (
    LeaveDecisionRequest,
    LeaveDecisionResult,
    LeaveRequestAuditOut,
    LeaveRequestCreate,
    LeaveRequestListResponse,
    LeaveRequestOut,
    LeaveRequestUpdate,
)
from leave_compliance.services import leave_request_service

router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


@router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests_endpoint(
    employee_id: Optional[int] = Query(None),
    leave_type_id: Optional[int] = Query(None),
    status: Optional[LeaveRequestStatus] = Query(None),
    start_date: Optional[date] = Query(None, description="Requests ending on or after this date"),
    end_date: Optional[date] = Query(None, description="Requests starting on or before this date"),
    year: Optional[int] = Query(None, ge=1900, le=2100),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """List leave requests visible to the caller, newest first"""
    requests, total = leave_request_service.list_leave_requests(
        db,
        current_user,
        employee_id=employee_id,
        leave_type_id=leave_type_id,
        status_filter=status,
        start_date=start_date,
        end_date=end_date,
        year=year,
        page=page,
        page_size=page_size,
    )
    return LeaveRequestListResponse(
        requests=[LeaveRequestOut.model_validate(r) for r in requests],
        pagination=PaginationOut.build(page, page_size, total),
    )


@router.post("", response_model=LeaveRequestOut, status_code=201)
async def create_leave_request_endpoint(
    data: LeaveRequestCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """
    Submit a leave request

    Compliance rejections return 400 with error, error_code and details.
    """
    return leave_request_service.create_leave_request(db, current_user, data, ip_address=_client_ip(request))


@router.get("/pending", response_model=List[LeaveRequestOut])
async def pending_approvals_endpoint(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(APPROVE_REQUESTS))
):
    """Pending requests the caller may decide, oldest first"""
    return leave_request_service.list_pending_for_approver(db, current_user)


@router.put("/{request_id}", response_model=LeaveRequestOut)
async def update_leave_request_endpoint(
    request_id: int,
    data: LeaveRequestUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Modify one of your pending requests"""
    return leave_request_service.update_leave_request(
        db, current_user, request_id, data, ip_address=_client_ip(request)
    )


@router.delete("/{request_id}", response_model=LeaveRequestOut)
async def cancel_leave_request_endpoint(
    request_id: int,
    request: Request,
    reason: Optional[str] = Query(None, max_length=500),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Cancel one of your pending or approved requests"""
    return leave_request_service.cancel_leave_request(
        db, current_user, request_id, reason=reason, ip_address=_client_ip(request)
    )


@router.put("/{request_id}/approve", response_model=LeaveDecisionResult)
async def decide_leave_request_endpoint(
    request_id: int,
    decision: LeaveDecisionRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(APPROVE_REQUESTS))
):
    """Approve or deny a pending request"""
    leave_request, message = leave_request_service.decide_leave_request(
        db, current_user, request_id, decision, ip_address=_client_ip(request)
    )
    return LeaveDecisionResult(request=LeaveRequestOut.model_validate(leave_request), message=message)


@router.get("/{request_id}/audit", response_model=List[LeaveRequestAuditOut])
async def leave_request_audit_endpoint(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Audit trail of a request, newest first"""
    return leave_request_service.list_request_audit(db, current_user.tenant_id, request_id)

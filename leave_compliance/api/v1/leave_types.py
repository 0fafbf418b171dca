"""
Leave type endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from leave_compliance.core.deps import get_db, get_current_user, require_permission
from leave_compliance.core.permissions import MANAGE_TYPES, has_permission
from leave_compliance.models.employee import Employee
from leave_compliance.schemas.common import MessageOut
from leave_compliance.schemas.leave_type import LeaveTypeCreate, LeaveTypeUpdate, LeaveTypeOut
from leave_compliance.services.leave_type_service import (
    list_leave_types,
    create_leave_type,
    update_leave_type,
    deactivate_leave_type,
)

router = APIRouter()


@router.get("", response_model=List[LeaveTypeOut])
async def list_leave_types_endpoint(
    include_inactive: bool = Query(False, description="Include deactivated types (type managers only)"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """List the tenant's leave types"""
    include_inactive = include_inactive and has_permission(current_user.role, MANAGE_TYPES)
    return list_leave_types(db, current_user.tenant_id, include_inactive=include_inactive)


@router.post("", response_model=LeaveTypeOut, status_code=201)
async def create_leave_type_endpoint(
    data: LeaveTypeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_TYPES))
):
    """Create a leave type"""
    return create_leave_type(db, current_user.tenant_id, data, actor_id=current_user.id)


@router.put("/{leave_type_id}", response_model=LeaveTypeOut)
async def update_leave_type_endpoint(
    leave_type_id: int,
    data: LeaveTypeUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_TYPES))
):
    """Update a leave type"""
    return update_leave_type(db, current_user.tenant_id, leave_type_id, data, actor_id=current_user.id)


@router.delete("/{leave_type_id}", response_model=MessageOut)
async def delete_leave_type_endpoint(
    leave_type_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_TYPES))
):
    """Deactivate a leave type (soft delete)"""
    deactivate_leave_type(db, current_user.tenant_id, leave_type_id, actor_id=current_user.id)
    return MessageOut(message="Leave type deactivated")

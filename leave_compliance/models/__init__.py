"""
Database models
"""
from leave_compliance.models.tenant import Tenant
from leave_compliance.models.department import Department
from leave_compliance.models.employee import Employee, Role
from leave_compliance.models.audit_log import AuditLog
from leave_compliance.models.leave import (
    LeaveType,
    LeaveBalance,
    LeaveTransaction,
    LeaveRequest,
    LeaveRequestAudit,
    LeaveRequestStatus,
    LeaveTransactionAction,
    LeaveAuditAction,
)
from leave_compliance.models.holiday import HolidayCalendar
from leave_compliance.models.blackout import BlackoutPeriod

__all__ = [
    "Tenant",
    "Department",
    "Employee",
    "Role",
    "AuditLog",
    "LeaveType",
    "LeaveBalance",
    "LeaveTransaction",
    "LeaveRequest",
    "LeaveRequestAudit",
    "LeaveRequestStatus",
    "LeaveTransactionAction",
    "LeaveAuditAction",
    "HolidayCalendar",
    "BlackoutPeriod",
]

"""
Leave models
"""
from sqlalchemy import (
    Column,
    Integer,
    Date,
    DateTime,
    ForeignKey,
    String,
    Text,
    Numeric,
    Enum as SQLEnum,
    Boolean,
    JSON,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import text
import enum
from leave_compliance.db.base import Base


def _value_enum(enum_cls, length=20):
    """Store str enums by value (lowercase wire values) rather than by member name."""
    return SQLEnum(enum_cls, values_callable=lambda e: [m.value for m in e], native_enum=False, length=length)


class LeaveRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    CANCELLED = "cancelled"


# Once denied or cancelled a request can never change again
TERMINAL_REQUEST_STATUSES = frozenset({
    LeaveRequestStatus.DENIED,
    LeaveRequestStatus.CANCELLED,
})

# Statuses that block an overlapping new request
ACTIVE_REQUEST_STATUSES = (LeaveRequestStatus.PENDING, LeaveRequestStatus.APPROVED)


class LeaveTransactionAction(str, enum.Enum):
    MANUAL_ADJUST = "MANUAL_ADJUST"
    APPROVE_DEDUCT = "APPROVE_DEDUCT"
    CANCEL_RECREDIT = "CANCEL_RECREDIT"


class LeaveAuditAction(str, enum.Enum):
    CREATED = "created"
    APPROVED = "approved"
    DENIED = "denied"
    CANCELLED = "cancelled"
    MODIFIED = "modified"


class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    code = Column(String(20), nullable=False)
    requires_approval = Column(Boolean, nullable=False, default=True)
    requires_certificate = Column(Boolean, nullable=False, default=False)
    allow_negative_balance = Column(Boolean, nullable=False, default=False)
    max_balance = Column(Numeric(6, 2), nullable=True)
    minimum_entitlement_days = Column(Numeric(6, 2), nullable=True)
    enforce_minimum_entitlement = Column(Boolean, nullable=False, default=False)
    color = Column(String(7), nullable=False, default="#3B82F6")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_leave_types_tenant_code"),
    )


class LeaveBalance(Base):
    """
    One row per (tenant, employee, leave_type, period).
    remaining = balance_days - used_ytd (derived, never stored).
    """
    __tablename__ = "leave_balances"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False, index=True)
    balance_days = Column(Numeric(6, 2), nullable=False, default=0)
    used_ytd = Column(Numeric(6, 2), nullable=False, default=0)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    employee = relationship("Employee", backref="leave_balances")
    leave_type = relationship("LeaveType")

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "employee_id", "leave_type_id", "period_start",
            name="uq_leave_balances_employee_type_period",
        ),
    )

    @property
    def remaining_balance(self) -> float:
        return float(self.balance_days or 0) - float(self.used_ytd or 0)


class LeaveTransaction(Base):
    """Ledger for every balance mutation: manual adjust, approve deduct, cancel recredit."""
    __tablename__ = "leave_transactions"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    balance_id = Column(Integer, ForeignKey("leave_balances.id"), nullable=False, index=True)
    leave_request_id = Column(Integer, ForeignKey("leave_requests.id", ondelete="SET NULL"), nullable=True, index=True)
    delta_days = Column(Numeric(6, 2), nullable=False)  # + for credit, - for deduct
    action = Column(_value_enum(LeaveTransactionAction, 30), nullable=False)
    reason = Column(Text, nullable=False)
    actor_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    action_at = Column(DateTime(timezone=True), nullable=False)

    balance = relationship("LeaveBalance", backref="transactions")


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    half_day_start = Column(Boolean, nullable=False, default=False)
    half_day_end = Column(Boolean, nullable=False, default=False)
    days_count = Column(Numeric(6, 2), nullable=True)
    status = Column(_value_enum(LeaveRequestStatus), nullable=False, default=LeaveRequestStatus.PENDING)
    note = Column(Text, nullable=True)
    attachment_path = Column(String, nullable=True)
    denial_reason = Column(Text, nullable=True)
    approver_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
    decided_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    employee = relationship("Employee", foreign_keys=[employee_id])
    approver = relationship("Employee", foreign_keys=[approver_id])
    cancelled_by = relationship("Employee", foreign_keys=[cancelled_by_id])
    leave_type = relationship("LeaveType")
    audit_entries = relationship("LeaveRequestAudit", back_populates="leave_request", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_leave_requests_employee_dates", "employee_id", "start_date", "end_date"),
        CheckConstraint("start_date <= end_date", name="check_start_date_le_end_date"),
    )


class LeaveRequestAudit(Base):
    __tablename__ = "leave_request_audit"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("leave_requests.id"), nullable=False, index=True)
    changed_by = Column(Integer, ForeignKey("employees.id"), nullable=False)
    action = Column(_value_enum(LeaveAuditAction), nullable=False)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    reason = Column(Text, nullable=True)
    ip_address = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    leave_request = relationship("LeaveRequest", back_populates="audit_entries")

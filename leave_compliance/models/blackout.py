"""
Blackout period model
"""
from sqlalchemy import Column, Integer, Date, DateTime, String, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from leave_compliance.db.base import Base


class BlackoutPeriod(Base):
    """Date range during which leave requests are disallowed. NULL scope columns match everything."""
    __tablename__ = "blackout_periods"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    leave_type = relationship("LeaveType")
    department = relationship("Department")

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="check_blackout_end_ge_start"),
        Index("ix_blackout_periods_tenant_dates", "tenant_id", "start_date", "end_date"),
    )

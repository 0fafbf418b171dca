"""
Holiday calendar model
"""
from sqlalchemy import Column, Integer, Date, DateTime, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from leave_compliance.db.base import Base


class HolidayCalendar(Base):
    __tablename__ = "holiday_calendars"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    is_half_day = Column(Boolean, default=False, nullable=False)
    country = Column(String(100), nullable=True)
    region = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "date", name="uq_holiday_calendars_tenant_date"),
    )

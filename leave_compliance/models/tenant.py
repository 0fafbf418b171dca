"""
Tenant model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, text
from leave_compliance.db.base import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # Enabled feature slugs; NULL falls back to settings.DEFAULT_FEATURES
    features = Column(JSON, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)

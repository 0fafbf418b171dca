"""
Employee model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from leave_compliance.db.base import Base


class Role(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    PEOPLE_OPS = "people_ops"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    emp_code = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    role = Column(
        SQLEnum(Role, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
        default=Role.EMPLOYEE,
    )
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    manager_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    department = relationship("Department", backref="employees")
    manager = relationship("Employee", remote_side=[id], backref="direct_reports")

    __table_args__ = (
        UniqueConstraint("tenant_id", "emp_code", name="uq_employees_tenant_emp_code"),
    )

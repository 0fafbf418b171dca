"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time; provide test values before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-leave-compliance-tests")
os.environ.setdefault("APP_ENV", "local")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine
from leave_compliance.main import app
from leave_compliance.db.base import Base
from leave_compliance.core.deps import get_db
from leave_compliance.core.security import create_access_token
from leave_compliance.utils.datetime_utils import now_utc

# Import all models to ensure they're registered with Base.metadata
from leave_compliance.models import (
    Tenant,
    Department,
    Employee,
    Role,
    LeaveType,
    LeaveBalance,
)  # noqa


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Balances in tests cover calendar year 2030; request dates are fixed weekdays in it
PERIOD_START = date(2030, 1, 1)
PERIOD_END = date(2030, 12, 31)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(employee):
    """Bearer header for an employee"""
    token = create_access_token({"sub": str(employee.id)})
    return {"Authorization": f"Bearer {token}"}


def make_employee(db, tenant, emp_code, name, role=Role.EMPLOYEE, department=None, manager=None, active=True):
    employee = Employee(
        tenant_id=tenant.id,
        emp_code=emp_code,
        name=name,
        email=f"{emp_code.lower()}@example.com",
        role=role,
        department_id=department.id if department else None,
        manager_id=manager.id if manager else None,
        active=active,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def make_leave_type(db, tenant, code="PTO", name="Paid Time Off", **overrides):
    now = now_utc()
    fields = dict(
        tenant_id=tenant.id,
        name=name,
        code=code,
        requires_approval=True,
        requires_certificate=False,
        allow_negative_balance=False,
        enforce_minimum_entitlement=False,
        color="#3B82F6",
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    leave_type = LeaveType(**fields)
    db.add(leave_type)
    db.commit()
    db.refresh(leave_type)
    return leave_type


def make_balance(db, employee, leave_type, balance_days=10, used_ytd=0,
                 period_start=PERIOD_START, period_end=PERIOD_END):
    now = now_utc()
    balance = LeaveBalance(
        tenant_id=employee.tenant_id,
        employee_id=employee.id,
        leave_type_id=leave_type.id,
        balance_days=Decimal(str(balance_days)),
        used_ytd=Decimal(str(used_ytd)),
        period_start=period_start,
        period_end=period_end,
        created_at=now,
        updated_at=now,
    )
    db.add(balance)
    db.commit()
    db.refresh(balance)
    return balance


@pytest.fixture
def tenant(db):
    """Create a tenant with leave management enabled"""
    t = Tenant(name="Acme", features=["leave_management"], active=True)
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


@pytest.fixture
def other_tenant(db):
    t = Tenant(name="Globex", features=["leave_management"], active=True)
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


@pytest.fixture
def department(db, tenant):
    """Create a test department"""
    dept = Department(tenant_id=tenant.id, name="Engineering", active=True)
    db.add(dept)
    db.commit()
    db.refresh(dept)
    return dept


@pytest.fixture
def admin(db, tenant, department):
    return make_employee(db, tenant, "ADM001", "Alex Admin", role=Role.ADMIN, department=department)


@pytest.fixture
def manager(db, tenant, department):
    return make_employee(db, tenant, "MGR001", "Morgan Manager", role=Role.MANAGER, department=department)


@pytest.fixture
def employee(db, tenant, department, manager):
    """Employee reporting to the manager"""
    return make_employee(db, tenant, "EMP001", "Erin Employee", department=department, manager=manager)


@pytest.fixture
def leave_type(db, tenant):
    return make_leave_type(db, tenant)


@pytest.fixture
def balance(db, employee, leave_type):
    """10 days of PTO for 2030, none used"""
    return make_balance(db, employee, leave_type)

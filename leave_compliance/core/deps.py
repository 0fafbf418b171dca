"""
Dependencies and guards for FastAPI endpoints
"""
from typing import Generator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from leave_compliance.db.session import SessionLocal
from leave_compliance.core.config import settings
from leave_compliance.core.permissions import has_permission
from leave_compliance.core.security import decode_token
from leave_compliance.models.employee import Employee
from leave_compliance.models.tenant import Tenant


security = HTTPBearer()


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Employee:
    """
    Get current authenticated employee from JWT token
    """
    token = credentials.credentials

    try:
        payload = decode_token(token)
        sub_value = payload.get("sub")
        if sub_value is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )
        employee_id: int = int(sub_value)
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not employee.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    tenant = db.query(Tenant).filter(Tenant.id == employee.tenant_id).first()
    if tenant is None or not tenant.active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to resolve tenant"
        )

    return employee


def require_feature(slug: str):
    """
    Dependency factory that gates a router on a tenant feature flag

    Usage:
        router = APIRouter(dependencies=[Depends(require_feature("leave_management"))])
    """
    def feature_checker(current_user: Employee = Depends(get_current_user), db: Session = Depends(get_db)) -> Employee:
        tenant = db.query(Tenant).filter(Tenant.id == current_user.tenant_id).first()
        features = tenant.features if tenant and tenant.features is not None else settings.get_default_features()
        if slug not in features:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Feature '{slug}' is not enabled for this tenant"
            )
        return current_user
    return feature_checker


def require_permission(permission: str):
    """
    Dependency factory for permission-based access control

    Usage:
        @router.post("/types")
        async def create_type(user: Employee = Depends(require_permission("leave.manage_types"))):
            ...
    """
    def permission_checker(current_user: Employee = Depends(get_current_user)) -> Employee:
        if not has_permission(current_user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_user
    return permission_checker

"""
Health check endpoint
"""
from fastapi import APIRouter
from leave_compliance.constants import SERVICE_NAME

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint

    Returns service status. Needs no token and no database.
    """
    return {
        "status": "ok",
        "service": SERVICE_NAME,
    }

"""
Main API router
"""
from fastapi import APIRouter, Depends

from leave_compliance.api.v1 import (
    health,
    version,
    leave_types,
    balances,
    holidays,
    blackout_periods,
    leave_requests,
    team_calendar,
    leave_analytics,
)
from leave_compliance.constants import LEAVE_FEATURE
from leave_compliance.core.deps import require_feature

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])

# Every leave route needs a token and the tenant's leave_management feature
leave_router = APIRouter(dependencies=[Depends(require_feature(LEAVE_FEATURE))])
leave_router.include_router(leave_types.router, prefix="/types", tags=["leave-types"])
leave_router.include_router(balances.router, prefix="/balances", tags=["leave-balances"])
leave_router.include_router(holidays.router, prefix="/holidays", tags=["holidays"])
leave_router.include_router(blackout_periods.router, prefix="/blackout-periods", tags=["blackout-periods"])
leave_router.include_router(leave_requests.router, prefix="/requests", tags=["leave-requests"])
leave_router.include_router(team_calendar.router, prefix="/team-calendar", tags=["team-calendar"])
leave_router.include_router(leave_analytics.router, prefix="/analytics", tags=["leave-analytics"])

api_router.include_router(leave_router, prefix="/leave")

"""
Central error handling for the Leave Compliance Service
"""
import logging
import traceback
from typing import Any, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException

from leave_compliance.core.config import settings
from leave_compliance.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)


class ComplianceRejected(Exception):
    """
    Raised by the request service when the compliance evaluator rejects a request.

    Carries the rejection verdict so the handler can render the
    ``{error, error_code, details}`` payload the client expects.
    """

    def __init__(self, verdict: Any):
        self.verdict = verdict
        super().__init__(verdict.message)

    @property
    def error_code(self) -> str:
        return self.verdict.error_code

    def details(self) -> Dict[str, Any]:
        """Contextual fields of the failing check (the blackout struct for blackout conflicts)"""
        blackout = getattr(self.verdict, "blackout_period", None)
        if blackout is not None:
            return blackout.model_dump()
        return self.verdict.model_dump(exclude={"valid", "error_code", "message"})


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "status_code": exc.status_code,
            "detail": sanitize_for_json(exc.detail),
            "path": str(request.url.path)
        },
        headers=getattr(exc, "headers", None),
    )


async def compliance_exception_handler(request: Request, exc: ComplianceRejected) -> JSONResponse:
    """
    Render a compliance rejection as 400 with the machine-readable error code.
    """
    content = {
        "error": exc.verdict.message,
        "error_code": exc.error_code,
        "details": sanitize_for_json(exc.details()),
        "path": str(request.url.path),
    }
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "status_code": 422,
                "detail": "Validation error: Invalid request data",
                "path": str(request.url.path)
            }
        )

    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": True,
            "status_code": 422,
            "detail": "Validation error",
            "errors": sanitize_for_json(errors),
            "path": str(request.url.path)
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    logger.error("Unhandled exception: %s", exc, exc_info=True)

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "status_code": 500,
                "detail": "Internal server error",
                "path": str(request.url.path)
            },
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "status_code": 500,
            "detail": str(exc),
            "path": str(request.url.path),
            "traceback": traceback.format_exc() if settings.APP_ENV == "local" else None
        },
    )

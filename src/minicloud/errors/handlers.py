"""FastAPI exception handlers producing a uniform ErrorResponse."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from minicloud.errors.exceptions import MiniCloudError, OrchestratorUnavailableError
from minicloud.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_body(request: Request, code: str, message: str, details=None) -> dict:
    trace_id = getattr(request.state, "trace_id", "trc_unknown")
    error_response = ErrorResponse(
        schema_version="1.0",
        error=ErrorDetail(
            code=code,
            message=message,
            details=details,
            trace_id=trace_id,
            timestamp=datetime.now(timezone.utc),
        ),
    )
    return error_response.model_dump(mode="json", exclude_none=True)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(MiniCloudError)
    async def minicloud_error_handler(request: Request, exc: MiniCloudError):
        if isinstance(exc, OrchestratorUnavailableError):
            logger.warning(
                "orchestrator_unavailable",
                extra={"path": request.url.path, "method": request.method, "reason": exc.message},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = {
            ".".join(str(loc) for loc in err["loc"] if loc != "body"): err["msg"]
            for err in exc.errors()
        }
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "VALIDATION_ERROR", "Invalid request", details),
        )

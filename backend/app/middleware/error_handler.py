"""
Error Handler Middleware

FastAPI middleware that catches all unhandled exceptions
and logs them using the error logging service.
"""

from typing import Callable
from fastapi import Request, Response, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.services.error_logging import error_logger


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Turns unhandled exceptions into a 500 carrying the error log id.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except HTTPException as http_exc:
            # 4xx are expected client errors and are not logged
            if http_exc.status_code >= 500:
                error_logger.log_error(
                    http_exc,
                    request=request,
                    severity="error",
                    context={"status_code": http_exc.status_code, "detail": http_exc.detail}
                )

            return JSONResponse(
                status_code=http_exc.status_code,
                content={"detail": http_exc.detail}
            )

        except Exception as exc:
            error_id = error_logger.log_error(
                exc,
                request=request,
                severity="critical",
                context={"unhandled": True}
            )

            return JSONResponse(
                status_code=500,
                content={
                    "detail": "An internal error occurred. Report the error id to the administrator.",
                    "error_id": str(error_id) if error_id else None
                }
            )

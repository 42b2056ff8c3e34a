"""API error rendering

Use case errors travel to the client as ``{"error": {"code", "message", "reason"}}``.
"""

import logging
from typing import Optional
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INSUFFICIENT_FUNDS": status.HTTP_402_PAYMENT_REQUIRED,
    "CONFLICT": status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    """Raised by routes to return a use case error to the caller"""

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or STATUS_BY_CODE.get(
            error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def error_body(error: Error) -> dict:
    return {"error": error.model_dump()}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    error = Error(code="VALIDATION_ERROR", message="Invalid request parameters", reason=details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(error))

"""
Exception handlers for the HTTP API.

Maps domain and cancellation errors to HTTP responses in one place.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from internal.domain.errors import (
    DomainError,
    DomainValidationError,
    DuplicateProductNameError,
    NullInputError,
    ProductNotFoundError,
)
from internal.transport.http.dto import ErrorResponse
from pkg.cancellation import OperationCancelledError
from pkg.logger.logger import get_logger, get_request_id

logger = get_logger(__name__)

# nginx convention for "client closed request"
HTTP_499_CLIENT_CLOSED_REQUEST = 499
# Fallback for domain errors without a dedicated status
HTTP_422_UNPROCESSABLE_CONTENT = 422

_DOMAIN_STATUS = {
    DuplicateProductNameError: status.HTTP_409_CONFLICT,
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    DomainValidationError: status.HTTP_400_BAD_REQUEST,
    NullInputError: status.HTTP_400_BAD_REQUEST,
}


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    body = ErrorResponse(detail=detail, code=code, request_id=get_request_id())
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate a domain error into its HTTP status."""
    status_code = next(
        (code for error_type, code in _DOMAIN_STATUS.items() if isinstance(exc, error_type)),
        HTTP_422_UNPROCESSABLE_CONTENT,
    )
    logger.warning(
        "Request rejected",
        path=request.url.path,
        code=exc.code,
        error=exc.message,
        status_code=status_code,
    )
    return _error_response(status_code, exc.message, exc.code)


async def cancelled_error_handler(
    request: Request,
    exc: OperationCancelledError,
) -> JSONResponse:
    """Report a cancelled request as a failure."""
    status_code = (
        status.HTTP_504_GATEWAY_TIMEOUT
        if exc.deadline_exceeded
        else HTTP_499_CLIENT_CLOSED_REQUEST
    )
    logger.warning("Request cancelled", path=request.url.path, reason=exc.reason)
    return _error_response(status_code, exc.message, exc.reason)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide their details from the client."""
    logger.exception("Unhandled error", path=request.url.path, error=str(exc))
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "internal_error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers on the application.

    Args:
        app: FastAPI application.
    """
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(OperationCancelledError, cancelled_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

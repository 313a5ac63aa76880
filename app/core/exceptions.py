from fastapi import Request
from fastapi.responses import JSONResponse
import logging

from app.payments.exceptions import (
    InvalidStateTransition,
    PaymentFailed,
    PaymentGatewayError,
    PaymentIntegrityError,
    PaymentNotFoundError,
    PaymentValidationError,
    SecurityError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# First match wins: subclasses before their parents.
STATUS_BY_ERROR = (
    (SecurityError, 403),
    (PaymentValidationError, 400),
    (PaymentNotFoundError, 404),
    (PaymentIntegrityError, 409),
    (InvalidStateTransition, 409),
    (PaymentFailed, 402),
    (UpstreamError, 502),
)


def status_for(exc: PaymentGatewayError) -> int:
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return 500


def _messages(request: Request) -> dict:
    messages = getattr(request.state, "messages", None)
    if messages is None:
        return {"errors": [], "statuses": []}
    return messages.as_dict()


async def payment_error_handler(request: Request, exc: PaymentGatewayError):
    status_code = status_for(exc)
    message = str(exc)
    details = None

    if isinstance(exc, UpstreamError):
        message = exc.error_message or message
        details = {
            "http_code": exc.http_code,
            "error_code": exc.error_code,
            "url": exc.url,
        }
    elif isinstance(exc, PaymentFailed):
        details = {"status_code": exc.status_code}

    if status_code >= 500 or isinstance(exc, (SecurityError, PaymentIntegrityError)):
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "message": message,
            "messages": _messages(request),
            "details": details,
        },
    )


async def not_found_handler(request: Request, exc):
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "message": getattr(exc, "detail", None) or f"'{request.url.path}' not found",
            "path": request.url.path,
        },
    )


async def internal_error_handler(request: Request, exc):
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "Check server logs.",
        },
    )

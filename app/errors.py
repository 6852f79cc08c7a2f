"""
AuthNotes - Application errors and their HTTP mapping.

Services raise these exceptions; register_exception_handlers() turns them
into JSON responses of the form:

    {"message": "Human-readable message", "code": "MACHINE_CODE"}

Request validation failures additionally carry field-level messages:

    {"message": "Validation failed", "code": "VALIDATION_ERROR",
     "errors": [{"param": "email", "msg": "value is not a valid email address"}]}
"""
import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

logger = logging.getLogger("authnotes.errors")


class AppError(Exception):
    """Base class for errors that map onto a client-facing response."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing fields."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.errors = errors or []


class DuplicateResourceError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "EMAIL_EXISTS"
    default_message = "User already exists with this email"


class IdentityConflictError(DuplicateResourceError):
    """The Google subject is already bound to another account."""
    code = "IDENTITY_EXISTS"
    default_message = "Another account already uses this Google identity"


class AuthenticationError(AppError):
    """Missing, invalid or expired bearer token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "NOT_AUTHENTICATED"
    default_message = "Not authenticated"


class InvalidCredentialsError(AuthenticationError):
    # Login failures answer 400 with one message for every cause
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class InvalidOAuthTokenError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "OAUTH_ERROR"
    default_message = "Invalid Google token"


class NotFoundError(AppError):
    """Absent, or owned by someone else. The two cases are indistinguishable."""
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Not found"


class RateLimitedError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"
    default_message = "Too many requests"


class UpstreamError(AppError):
    """Store or identity provider unreachable."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "UPSTREAM_ERROR"
    default_message = "Server error, please try again later"


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------

def _error_body(exc: AppError) -> dict:
    body = {"message": exc.message, "code": exc.code}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, UpstreamError):
        logger.error("Upstream failure on %s %s: %s", request.method, request.url.path, exc.message)
        # Server-side detail stays in the log
        exc = UpstreamError()
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc), headers=headers)


def _field_name(loc) -> str:
    # Drop the leading "body"/"path"/"query" marker
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"param": _field_name(err.get("loc", ())), "msg": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed", "code": ValidationError.code, "errors": errors},
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    body = _error_body(RateLimitedError(f"Rate limit exceeded: {exc.detail}"))
    response = JSONResponse(status_code=RateLimitedError.status_code, content=body)
    # Retry-After and X-RateLimit-* when the limiter has headers enabled
    return request.app.state.limiter._inject_headers(response, getattr(request.state, "view_rate_limit", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "code": AppError.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

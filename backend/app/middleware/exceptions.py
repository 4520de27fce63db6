"""Application exceptions and the handlers that render them.

Every error leaves the API in the same envelope:

    {
        "success": false,
        "message": "Human-readable message",
        "code": "ERROR_CODE",
        "errors": {"field": ["message", ...]},   // validation only
        ...extra keys...,                        // e.g. can_switch
        "error": "internal detail"               // debug builds only
    }
"""

import logging
from typing import Any, Union

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings

logger = logging.getLogger(__name__)


class AgriRentException(Exception):
    """Base exception for AgriRent application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        errors: dict[str, list[str]] | None = None,
        extra: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.errors = errors
        self.extra = extra or {}
        super().__init__(self.message)


# ── Input ────────────────────────────────────────────────────

class ValidationFailed(AgriRentException):
    def __init__(self, errors: dict[str, list[str]], message: str = "Validation failed"):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_ERROR",
            errors=errors,
        )


class DuplicatePhone(AgriRentException):
    def __init__(self):
        super().__init__(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="DUPLICATE_PHONE",
            errors={"phone": ["This phone number is already registered."]},
        )


# ── Authentication ───────────────────────────────────────────

class InvalidCredentials(AgriRentException):
    """Unknown phone and wrong password look identical to the caller."""

    def __init__(self):
        super().__init__(
            message="Invalid phone number or password.",
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="INVALID_CREDENTIALS",
            errors={"phone": ["The provided credentials are incorrect."]},
        )


class AccountDeactivated(AgriRentException):
    def __init__(self):
        super().__init__(
            message="Your account has been deactivated. Please contact support.",
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="ACCOUNT_DEACTIVATED",
        )


class AuthenticationRequired(AgriRentException):
    def __init__(self, message: str = "Authentication required."):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTHENTICATION_REQUIRED",
        )


class RevocationUnavailable(AgriRentException):
    """The token could not be added to the revocation list; it is still live."""

    def __init__(self):
        super().__init__(
            message="Could not log out right now. Please try again.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="REVOCATION_UNAVAILABLE",
        )


# ── Roles and profiles ───────────────────────────────────────

class ProfileMissing(AgriRentException):
    """Role switch target has no profile record."""

    def __init__(self, role: str):
        super().__init__(
            message=f"You need to complete your {role} profile first.",
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="PROFILE_MISSING",
            extra={"requires_profile_setup": True},
        )


class ProfileAlreadyExists(AgriRentException):
    def __init__(self, role: str):
        super().__init__(
            message=f"You already have a {role} profile.",
            status_code=status.HTTP_409_CONFLICT,
            error_code="PROFILE_EXISTS",
        )


class RoleMismatch(AgriRentException):
    def __init__(self, required_role: str, current_role: str, can_switch: bool):
        super().__init__(
            message=f"Access denied. {required_role} role required.",
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="ROLE_MISMATCH",
            extra={
                "required_role": required_role,
                "current_role": current_role,
                "can_switch": can_switch,
            },
        )


class ProfileIncomplete(AgriRentException):
    def __init__(self, role: str):
        super().__init__(
            message=f"Please complete your {role} profile to access this feature.",
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="PROFILE_INCOMPLETE",
            extra={"profile_incomplete": True, "profile_type": role},
        )


class ResourceNotFoundError(AgriRentException):
    """Exception for resources not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
        )


# ── Rendering ────────────────────────────────────────────────

def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "ERROR",
    errors: dict | None = None,
    extra: dict | None = None,
    internal_error: str | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    """Create the standard `success: false` envelope."""
    content: dict[str, Any] = {
        "success": False,
        "message": message,
        "code": error_code,
    }
    if errors:
        content["errors"] = errors
    if extra:
        content.update(extra)
    if internal_error and settings.debug:
        content["error"] = internal_error

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def format_validation_errors(raw_errors: list[dict]) -> dict[str, list[str]]:
    """Collapse pydantic error dicts into {field: [messages]}.

    The request-part prefix ("body", "query") is dropped; nested list
    positions stay, e.g. "service_districts.0".
    """
    errors: dict[str, list[str]] = {}
    for error in raw_errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        field = ".".join(loc) or "non_field_errors"
        message = error.get("msg", "Invalid value")
        # "Value error, Passwords do not match" -> "Passwords do not match"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


def _where(request: Request) -> dict[str, str]:
    return {"path": request.url.path, "method": request.method}


async def agrirent_exception_handler(request: Request, exc: AgriRentException) -> JSONResponse:
    logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}", extra=_where(request))
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        errors=exc.errors,
        extra=exc.extra,
    )


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    """Framework-raised HTTP errors (unknown route, wrong method) in the envelope."""
    message = str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "API endpoint not found."
    elif exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} on {request.url.path}: {message}", extra=_where(request))

    return create_error_response(
        status_code=exc.status_code,
        message=message,
        error_code=f"HTTP_{exc.status_code}",
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, ValidationError],
) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    logger.info(f"Validation failed on {request.url.path}: {sorted(errors)}", extra=_where(request))
    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation failed",
        error_code="VALIDATION_ERROR",
        errors=errors,
    )


# Substring of the driver message -> (client message, code)
INTEGRITY_MESSAGES = (
    ("unique", "A record with this value already exists", "DUPLICATE_RECORD"),
    ("foreign key", "Referenced record does not exist", "FOREIGN_KEY_VIOLATION"),
    ("not null", "Required field is missing", "NULL_VALUE_NOT_ALLOWED"),
)


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violations, e.g. two registrations racing for one phone."""
    detail = str(getattr(exc, "orig", None) or exc)
    logger.error(f"Integrity error on {request.url.path}: {detail}", extra=_where(request))

    message, error_code = "Database constraint violation", "INTEGRITY_ERROR"
    for needle, known_message, known_code in INTEGRITY_MESSAGES:
        if needle in detail.lower():
            message, error_code = known_message, known_code
            break

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message=message,
        error_code=error_code,
        internal_error=detail,
    )


async def operational_exception_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(f"Database unavailable on {request.url.path}: {exc}", extra=_where(request))
    return create_error_response(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        message="Database temporarily unavailable. Please try again.",
        error_code="DATABASE_UNAVAILABLE",
        internal_error=str(exc),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled {type(exc).__name__} on {request.url.path}", extra=_where(request))
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred. Please try again later.",
        error_code="INTERNAL_SERVER_ERROR",
        internal_error=f"{type(exc).__name__}: {exc}",
    )


def register_exception_handlers(app) -> None:
    """Attach every handler above to `app`; most specific types first."""
    handlers = (
        (AgriRentException, agrirent_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (ValidationError, validation_exception_handler),
        (IntegrityError, integrity_exception_handler),
        (OperationalError, operational_exception_handler),
        (HTTPException, http_exception_handler),
        (StarletteHTTPException, http_exception_handler),
        (Exception, unhandled_exception_handler),
    )
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)

"""Application error taxonomy and the FastAPI handlers that render it."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for client-facing errors; carries a stable code and an HTTP status."""

    code = "AppError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be completed."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class DuplicateEmail(AppError):
    code = "DuplicateEmail"
    default_message = "Email is already registered."


class InvalidCredentials(AppError):
    """Wrong email/password pair; never says which part was wrong."""

    code = "InvalidCredentials"
    default_message = "Invalid email or password."


class AccountDisabled(AppError):
    code = "AccountDisabled"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account is disabled. Contact support."


class InvalidToken(AppError):
    code = "InvalidToken"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token."


class UserNotFound(AppError):
    code = "UserNotFound"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User no longer exists."


class Forbidden(AppError):
    code = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied."


class ProtectedResource(AppError):
    code = "ProtectedResource"
    default_message = "The system administrator role is protected."


class ConfigurationError(AppError):
    """Deployment precondition violated (e.g. no roles seeded)."""

    code = "ConfigurationError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server is not configured."


class NotFound(AppError):
    code = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class DuplicateRole(AppError):
    code = "DuplicateRole"
    default_message = "A role with this name or slug already exists."


class InvalidRole(AppError):
    code = "InvalidRole"
    default_message = "Role is invalid."


class UnknownPermission(AppError):
    code = "UnknownPermission"
    default_message = "Unknown permission."


def error_body(code: str, message: str) -> dict[str, str]:
    """Structured error payload returned for every handled failure."""
    return {"code": code, "detail": message}


def _acting_user_id(request: Request) -> int | None:
    return getattr(request.state, "user_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers for AppError and for data-store failures."""

    @app.exception_handler(AppError)
    async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s on %s %s: %s",
                exc.code,
                request.method,
                request.url.path,
                exc.message,
            )
        else:
            logger.info(
                "%s on %s %s (user_id=%s)",
                exc.code,
                request.method,
                request.url.path,
                _acting_user_id(request),
            )
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message),
            headers=headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def _handle_db_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(
            "Database error on %s %s (user_id=%s): %s",
            request.method,
            request.url.path,
            _acting_user_id(request),
            type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("ServerError", "Internal server error."),
        )

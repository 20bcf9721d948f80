"""
Domain exceptions for the service layer.

Services raise these instead of HTTPException; the handlers registered in
`register_exception_handlers` translate them to a JSON body with a
`message` field and the matching status code.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base for business errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Malformed, missing or out-of-range input."""


class ConflictError(DomainError):
    """A unique field is already taken."""


class StateError(DomainError):
    """The entity is not in a state that allows the operation."""


class AuthenticationError(DomainError):
    """Missing or invalid token, or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(DomainError):
    """Authenticated, but the role is not allowed on this endpoint."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    """Resource absent, or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND


def _message_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return _message_response(exc.status_code, exc.message, headers)


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _message_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Request validation failed: {exc.errors()}")
    return _message_response(status.HTTP_400_BAD_REQUEST, "Invalid input")


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Attach the domain, HTTP and validation handlers to the app."""

    async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error: {str(exc)}")
        message = str(exc) if debug else "Internal Server Error"
        return _message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

"""
Application error types and their HTTP translation.

Every error maps to one status code and a JSON body of the form
``{"error": {"type": ..., "message": ..., "timestamp": ...}}``.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .models import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for all application errors."""

    error_type = "internal_error"
    status_code = 500
    prefix = "Internal server error"

    def __init__(self, message: object):
        self.message = str(message)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"

    def to_response(self) -> JSONResponse:
        body = ErrorResponse(
            error=ErrorDetail(type=self.error_type, message=str(self))
        )
        return JSONResponse(status_code=self.status_code, content=body.model_dump())


class ConfigError(AppError):
    error_type = "configuration_error"
    prefix = "Configuration error"


class ServerError(AppError):
    """Startup or runtime failure of a listener."""

    error_type = "server_error"
    prefix = "Server error"


class EnvironmentVariableError(AppError):
    """An environment variable is present but cannot be parsed."""

    error_type = "environment_error"
    prefix = "Environment variable error"

    def __init__(self, var_name: object, message: object):
        self.var_name = str(var_name)
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.prefix}: {self.var_name} - {self.message}"


class InternalError(AppError):
    pass


class ValidationError(AppError):
    """Malformed caller input."""

    error_type = "validation_error"
    status_code = 400
    prefix = "Validation error"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return exc.to_response()

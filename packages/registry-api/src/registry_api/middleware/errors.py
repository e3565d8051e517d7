# SPDX-License-Identifier: MIT
"""Error handling middleware and exception classes."""

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode:
    """Standard API error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    PLATFORM_NOT_FOUND = "PLATFORM_NOT_FOUND"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    UNAUTHORIZED = "UNAUTHORIZED"
    BACKEND_ERROR = "BACKEND_ERROR"
    ENCODING_ERROR = "ENCODING_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# HTTP status codes for each error
ERROR_STATUS_CODES = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.PROVIDER_NOT_FOUND: 404,
    ErrorCode.PLATFORM_NOT_FOUND: 404,
    ErrorCode.AUTHENTICATION_REQUIRED: 407,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.BACKEND_ERROR: 500,
    ErrorCode.ENCODING_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}


@dataclass
class ErrorDetail:
    """Detailed error information for a specific field or issue."""

    field: str
    error: str
    value: Any = None


@dataclass
class APIError(Exception):
    """Base API exception with structured error response.

    Attributes:
        code: Error code from ErrorCode class
        message: Human-readable error message
        details: List of detailed error information
    """

    code: str
    message: str
    details: list[ErrorDetail] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    @property
    def status_code(self) -> int:
        """Get HTTP status code for this error."""
        return ERROR_STATUS_CODES.get(self.code, 500)

    def to_response(self) -> dict:
        """Convert to API response format."""
        response = {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
        if self.details:
            response["error"]["details"] = [
                {"field": d.field, "error": d.error} for d in self.details
            ]
        return response


class InvalidRequestError(APIError):
    """Request body or path parameters are malformed."""

    def __init__(self, message: str, details: list[ErrorDetail] | None = None):
        super().__init__(
            code=ErrorCode.INVALID_REQUEST,
            message=message,
            details=details or [],
        )


class ProviderNotFoundError(APIError):
    """No versions are stored for the provider."""

    def __init__(self, namespace: str, name: str):
        super().__init__(
            code=ErrorCode.PROVIDER_NOT_FOUND,
            message=f"Provider '{namespace}/{name}' not found",
        )


class PlatformNotFoundError(APIError):
    """Version or os/arch platform does not exist for the provider."""

    def __init__(self, namespace: str, name: str, version: str, os: str, arch: str):
        super().__init__(
            code=ErrorCode.PLATFORM_NOT_FOUND,
            message=(
                f"Platform '{os}/{arch}' not found for version '{version}' "
                f"of provider '{namespace}/{name}'"
            ),
        )


class AuthenticationRequiredError(APIError):
    """Shared secret header is missing."""

    def __init__(self, header: str):
        super().__init__(
            code=ErrorCode.AUTHENTICATION_REQUIRED,
            message=f"Authentication required: missing '{header}' header",
        )


class UnauthorizedError(APIError):
    """Shared secret does not match."""

    def __init__(self, message: str = "Invalid secret key"):
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message=message,
        )


class BackendError(APIError):
    """Version catalog read or write failed."""

    def __init__(self, message: str = "Storage backend failure"):
        super().__init__(
            code=ErrorCode.BACKEND_ERROR,
            message=message,
        )


class EncodingError(APIError):
    """Stored provider data could not be decoded or encoded."""

    def __init__(self, message: str = "Failed to encode provider data"):
        super().__init__(
            code=ErrorCode.ENCODING_ERROR,
            message=message,
        )


def _request_context(request: Request, status: int, code: str) -> dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "status": status,
        "code": code,
    }


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    context = _request_context(request, exc.status_code, exc.code)
    if exc.status_code >= 500:
        logger.error(
            f"Request failed: {exc.message}",
            exc_info=exc.__cause__ or exc,
            extra={"context": context},
        )
    else:
        logger.warning(f"Request rejected: {exc.message}", extra={"context": context})

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "Unhandled exception while serving request",
        exc_info=exc,
        extra={"context": _request_context(request, 500, ErrorCode.INTERNAL_ERROR)},
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "An unexpected error occurred",
            }
        },
    )


def add_error_handlers(app: FastAPI) -> None:
    """Register error handlers with the FastAPI application."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

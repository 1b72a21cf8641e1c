"""
Application exceptions and their HTTP rendering
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class LajmeError(Exception):
    """Base class for errors raised by the application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else message

    def to_dict(self) -> dict:
        return {"error": self.error, "details": self.details}


class ValidationError(LajmeError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid request"

    def __init__(
        self,
        message: str,
        *,
        details: Any = None,
        error: Optional[str] = None,
        valid_values: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details)
        if error:
            self.error = error
        self.valid_values = valid_values

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.valid_values:
            body["valid_values"] = self.valid_values
        return body


class InvalidThresholdError(ValidationError, ValueError):
    """Similarity threshold outside its accepted range."""

    error = "Invalid similarity_threshold parameter"


class AuthenticationError(LajmeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class NotFoundError(LajmeError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class ArticleStoreError(LajmeError):
    """The article table could not be read or written."""

    error = "Article store unavailable"


class ProcessingError(LajmeError):
    """Unexpected failure inside deduplication or selection."""

    error = "Processing failed"


async def _lajme_error_handler(request: Request, exc: LajmeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": str(exc)},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register JSON renderers for application errors."""
    app.add_exception_handler(LajmeError, _lajme_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

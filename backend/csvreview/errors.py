"""
Error taxonomy and exception handlers.

Every domain error carries the HTTP status it maps to. Handlers return the
same ``{"detail": ...}`` body FastAPI uses for ``HTTPException`` so clients
see one error shape. Storage and unexpected failures are logged with their
traceback but only a generic message reaches the client.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


class CSVReviewError(Exception):
    """Base class for errors surfaced through the HTTP boundary."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_SERVER_ERROR

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def public_detail(self) -> str:
        """Message that is safe to send to the client"""
        return self.detail


class InvalidInput(CSVReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class InvalidFilterSyntax(InvalidInput):
    default_detail = "columnFilters must be a JSON object"


class NotFound(CSVReviewError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class NothingToExport(NotFound):
    default_detail = "No reviewed rows found"


class StorageFailure(CSVReviewError):
    """A store operation failed. The detail is logged, never returned."""
    default_detail = "Storage operation failed"

    @property
    def public_detail(self) -> str:
        return GENERIC_SERVER_ERROR


class StorageUnavailable(CSVReviewError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Database unavailable, try again later"


def _error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


async def csv_review_error_handler(request: Request, exc: CSVReviewError) -> JSONResponse:
    if isinstance(exc, StorageFailure):
        logger.error(
            "Storage failure on %s %s: %s",
            request.method,
            request.url.path,
            exc.detail,
            exc_info=exc.__cause__ or exc,
        )
    elif exc.status_code >= 500:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return _error_response(exc.status_code, exc.public_detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body/query shape errors as a 400 with a readable message"""
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", []) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = error.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)

    logger.warning("Validation error on %s: %s", request.url.path, "; ".join(messages))
    return _error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request")


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error on %s %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback, return a generic error"""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CSVReviewError, csv_review_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

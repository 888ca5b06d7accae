"""Domain error taxonomy and the FastAPI handlers that render it.

Every error body is ``{"message": ...}`` so clients can show it verbatim.
"""

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger("expense_tracker.errors")

NOT_FOUND_MESSAGE = "Expense not found"
INVALID_DATA_MESSAGE = "Invalid expense data"


class ExpenseTrackerError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ExpenseTrackerError):
    """Malformed or disallowed input on a write."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = INVALID_DATA_MESSAGE


class NotFound(ExpenseTrackerError):
    """Referenced expense id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = NOT_FOUND_MESSAGE


class ConcurrencyConflict(ExpenseTrackerError):
    """A write lost a race with a concurrent delete.

    Callers see the same 404 as ``NotFound``.
    """

    status_code = status.HTTP_404_NOT_FOUND
    default_message = NOT_FOUND_MESSAGE


def domain_error_handler(request: Request, exc: ExpenseTrackerError):  # type: ignore
    if isinstance(exc, ConcurrencyConflict):
        logger.warning(
            "write raced with a concurrent delete",
            extra={"path": request.url.path},
        )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = f"No route for {request.method} {request.url.path}"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": INVALID_DATA_MESSAGE,
            "errors": jsonable_encoder(exc.errors()),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": ExpenseTrackerError.default_message},
    )

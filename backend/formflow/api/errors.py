"""Mapping of lifecycle errors to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from backend.formflow.errors import (
    DraftNotFound,
    FormflowError,
    FormNotFound,
    InvalidState,
    InvalidTransition,
    NotificationDeliveryError,
    PersistenceError,
    SubmissionNotFound,
    ValidationError,
)

STATUS_BY_ERROR: dict[type[FormflowError], int] = {
    DraftNotFound: status.HTTP_404_NOT_FOUND,
    FormNotFound: status.HTTP_404_NOT_FOUND,
    SubmissionNotFound: status.HTTP_404_NOT_FOUND,
    InvalidState: status.HTTP_409_CONFLICT,
    InvalidTransition: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
    NotificationDeliveryError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def formflow_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a lifecycle error with its citizen-facing message."""
    assert isinstance(exc, FormflowError)
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.user_message, "error": type(exc).__name__},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach lifecycle error handlers to the app."""
    app.add_exception_handler(FormflowError, formflow_error_handler)

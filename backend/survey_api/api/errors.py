"""
Error to HTTP status mapping.

Services raise SurveyError subclasses; a single exception handler turns
them into JSON responses with a stable error code.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from survey_api.shared.errors import (
    SurveyError,
    ValidationError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
    NoActiveSessionError,
)

logger = logging.getLogger(__name__)

# Checked in order; first matching base class wins
STATUS_CODES: list[tuple[type[SurveyError], int]] = [
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (NoActiveSessionError, 409),
]


def status_code_for(exc: SurveyError) -> int:
    for error_class, status_code in STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 500


async def survey_error_handler(request: Request, exc: SurveyError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the SurveyError handler on an application."""
    app.add_exception_handler(SurveyError, survey_error_handler)

"""Studio error → JSON response mapping."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from lingofy.domain.errors import (
    FieldPathError,
    GenerationError,
    ImageReadError,
    ImageValidationError,
    OperationInProgressError,
    SaveError,
    SessionNotFoundError,
    StudioError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[StudioError], int] = {
    FieldPathError: 400,
    ImageValidationError: 400,
    ImageReadError: 400,
    SessionNotFoundError: 404,
    OperationInProgressError: 409,
    SaveError: 502,
    GenerationError: 502,
}


def status_for(exc: StudioError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return 400


def error_body(exc: StudioError) -> dict:
    body: dict = {"error": exc.message, "code": exc.code}
    if isinstance(exc, ImageValidationError):
        body["errors"] = exc.errors
    return body


async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        "%s %s → %d %s", request.method, request.url.path, status_code, exc.code
    )
    return JSONResponse(status_code=status_code, content=error_body(exc))

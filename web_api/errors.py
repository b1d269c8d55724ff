"""Map lesson errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.lessons import errors

logger = logging.getLogger(__name__)

# Most specific first: IndexOutOfRangeError/InvalidFieldPathError also subclass builtins
STATUS_CODES: list[tuple[type[Exception], int]] = [
    (errors.NotFoundError, 404),
    (errors.ValidationError, 422),
    (errors.InvalidFieldPathError, 400),
    (errors.IndexOutOfRangeError, 400),
    (errors.NoActiveDraftError, 409),
    (errors.RegenerationInProgressError, 409),
    (errors.GenerationError, 502),
    (errors.StoreUnavailableError, 503),
]


def status_for(exc: Exception) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


async def lesson_error_handler(request: Request, exc: errors.LessonError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(errors.LessonError, lesson_error_handler)

"""Translate service errors and request validation failures into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.services.errors import ErrorKind, SongServiceError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.EXTERNAL_API: status.HTTP_502_BAD_GATEWAY,
}

# Messages for malformed query/path parameters, keyed by parameter name
PARAMETER_MESSAGES = {
    "song_id": "Invalid ID",
    "page": "Invalid page number",
    "pageSize": "Invalid page size",
    "verse": "Invalid verse parameter",
    "limit": "Invalid limit parameter",
    "release": "Invalid release date",
}


def validation_message(exc: RequestValidationError) -> str:
    """Pick a short message describing the first invalid input."""
    for error in exc.errors():
        loc = error.get("loc", ())
        if not loc:
            continue
        if loc[0] == "body":
            return "Invalid request body"
        if len(loc) > 1:
            name = str(loc[1])
            return PARAMETER_MESSAGES.get(name, f"Invalid {name} parameter")
    return "Bad request"


async def song_service_error_handler(request: Request, exc: SongServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"message": exc.message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = validation_message(exc)
    logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SongServiceError, song_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

"""Error taxonomy surfaced by the song service."""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal"
    EXTERNAL_API = "external_api"


class SongServiceError(Exception):
    """Base class; ``kind`` tells the API layer which status code to use."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(SongServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Record not found"


class BadRequestError(SongServiceError):
    kind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"


class InternalError(SongServiceError):
    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"


class ExternalAPIError(SongServiceError):
    kind = ErrorKind.EXTERNAL_API
    default_message = "Failed to fetch data from external API"

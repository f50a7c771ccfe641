"""Error taxonomy shared by the server routes and the client package.

Every error carries an HTTP status and a user-facing message. The server turns
them into ``{"success": false, "message": ...}`` responses; the client raises
them from failed requests so callers handle a single hierarchy.
"""
from http import HTTPStatus


class AppError(Exception):
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(AppError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid email or password"


class ConflictError(AppError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Username or email already exists"


class UploadTooLargeError(AppError):
    status_code = HTTPStatus.REQUEST_ENTITY_TOO_LARGE
    default_message = "File exceeds the maximum upload size"

    def __init__(self, size: int, limit: int, message: str | None = None):
        self.size = size
        self.limit = limit
        super().__init__(message or f"File is {size} bytes, maximum allowed is {limit} bytes")


class InternalError(AppError):
    pass


class RemoteError(AppError):
    """A call to another service failed; ``status`` is the remote HTTP status, if any."""

    status_code = HTTPStatus.BAD_GATEWAY

    def __init__(self, message: str | None = None, status: int | None = None):
        self.status = status
        super().__init__(message)


class UploadError(RemoteError):
    default_message = "Upload failed"


class FetchError(RemoteError):
    default_message = "Failed to fetch media"


class RequestTimeoutError(AppError):
    status_code = HTTPStatus.GATEWAY_TIMEOUT
    default_message = "Request timed out"


_BY_STATUS = {
    HTTPStatus.BAD_REQUEST: ValidationError,
    HTTPStatus.UNAUTHORIZED: AuthError,
    HTTPStatus.CONFLICT: ConflictError,
}


def error_for_status(status: int, message: str | None = None) -> AppError:
    """Map a server error response back onto the matching exception."""
    if status == HTTPStatus.REQUEST_ENTITY_TOO_LARGE:
        return UploadTooLargeError(size=0, limit=0, message=message)
    cls = _BY_STATUS.get(status, InternalError)
    return cls(message)

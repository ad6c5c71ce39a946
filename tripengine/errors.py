"""
Error taxonomy for the trip engine.

ValidationError is raised before any network call. NetworkError and
RemoteServiceError come from the trips client and leave local state as it was.
"""
from typing import Optional


class TripEngineError(Exception):
    """Base exception for trip engine errors."""
    pass


class ValidationError(TripEngineError):
    """Input rejected locally; the operation was not attempted."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidInput(ValidationError):
    """Price calculation inputs out of range."""
    pass


class NetworkError(TripEngineError):
    """No response from the remote service (connection failure or timeout)."""

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class RemoteServiceError(TripEngineError):
    """The remote service answered with an error status."""

    def __init__(self, message: str, status_code: int, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ConflictError(RemoteServiceError):
    """The remote service rejected the write (4xx)."""
    pass


class NotFoundError(ConflictError):
    pass


class ServerError(RemoteServiceError):
    """The remote service failed (5xx)."""
    pass


_STATUS_MESSAGES = {
    401: "Your session has expired. Please sign in again.",
    403: "You do not have permission to perform this action.",
    404: "The requested resource was not found.",
    500: "Server error. Please try again later.",
    503: "Service temporarily unavailable. Please try again later.",
}


def user_message(error: Exception) -> str:
    """Turn an engine error into a message suitable for a banner."""
    if isinstance(error, ValidationError):
        return str(error)

    if isinstance(error, NetworkError):
        if error.timeout:
            return "Request timeout. Please try again."
        return "Cannot connect to server. Please check your internet connection."

    if isinstance(error, RemoteServiceError):
        if error.status_code in _STATUS_MESSAGES:
            return _STATUS_MESSAGES[error.status_code]
        if error.status_code in (400, 409, 422):
            if error.detail:
                return error.detail.strip().rstrip(".") + ". Please try again."
            return "The request was rejected. Please check your trip and try again."
        return f"Error {error.status_code}: Something went wrong. Please try again."

    return "An unexpected error occurred. Please try again."

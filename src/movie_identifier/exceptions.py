class MovieIdentifierError(Exception):
    """Base exception for movie identifier service."""


class ConfigurationError(MovieIdentifierError):
    """Raised when required configuration is missing or invalid."""


class RequestError(MovieIdentifierError):
    """
    Raised when a request to the inference endpoint fails.

    :param message: Human-readable error description
    :param status: HTTP status code, if a response was received
    :param attempt: Zero-based attempt index that produced this error
    """

    def __init__(self, message: str, status: int = None, attempt: int = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.attempt = attempt


class TransportError(RequestError):
    """Raised when the HTTP call itself fails (connection error, timeout)."""


class ServiceUnavailableError(RequestError):
    """Raised on HTTP 429 or 5xx responses."""


class ServiceRejectedError(RequestError):
    """Raised on any other non-success response carrying a service error message."""


class ResponseFormatError(MovieIdentifierError):
    """Raised when a successful response body cannot be decoded."""


class NoMatchError(MovieIdentifierError):
    """Raised when the response text contains no recognizable title."""


class SessionError(MovieIdentifierError):
    """Base exception for session state machine violations."""


class InvalidTransitionError(SessionError):
    """Raised when an action is not offered in the current session state."""


class SessionBusyError(InvalidTransitionError):
    """Raised when an action is attempted while a submission is in flight."""

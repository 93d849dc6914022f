"""Exception hierarchy for the live-coverage client."""


class LiveCoverageError(Exception):
    """Base class for every error raised by this package."""


class TransportError(LiveCoverageError):
    """The request never produced an HTTP response (DNS, connection, timeout)."""


class APIError(LiveCoverageError):
    """The server answered with a non-2xx status.

    Args:
        status_code: HTTP status returned by the server.
        message: Human-readable message, taken from the JSON ``message`` field
            when the server provides one.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class NotFoundError(APIError):
    """The requested coverage, update or question does not exist."""


class InvalidTransitionError(LiveCoverageError):
    """A moderation action is not allowed from the question's current state."""

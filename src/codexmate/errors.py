"""Error types raised by the session subsystem.

Routes translate these into HTTP errors, the action dispatcher and the
batch deleter into ``{"error": message}`` payloads, and the CLI into a
message on stderr.
"""


class SessionError(Exception):
    """Base class for session errors surfaced to callers."""

    status_code = 400
    default_message = "Session error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class SessionNotFoundError(SessionError):
    """Session could not be resolved, or lies outside its log root."""

    status_code = 404
    default_message = "Session file not found"


class InvalidSessionError(SessionError):
    """Bad parameters, wrong extension or a path that is not a file."""

    status_code = 400
    default_message = "Invalid session file"


class EmptySessionError(SessionError):
    """Session file has no bytes or no parseable records."""

    status_code = 422
    default_message = "Session file is empty"


class SessionIOError(SessionError):
    """Wrapped filesystem failure."""

    status_code = 500
    default_message = "Session I/O failed"

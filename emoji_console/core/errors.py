"""Error taxonomy for emoji console operations.

Every operational failure carries a machine-readable `code`, a human-readable
message and the HTTP status the API layer should answer with. "No match"
during normalize/resolve is not an error and never raises.
"""


class EmojiConsoleError(Exception):
    """Base exception for emoji console operations."""

    default_code = "INTERNAL_ERROR"
    default_status = 500

    def __init__(self, message: str, code: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.status = status or self.default_status


class PreconditionError(EmojiConsoleError):
    """Raised when a required artifact, directory or set key is absent."""

    default_code = "PRECONDITION_FAILED"
    default_status = 400


class NotFoundError(EmojiConsoleError):
    """Raised when an operation targets something that does not exist."""

    default_code = "NOT_FOUND"
    default_status = 404


class TransportError(EmojiConsoleError):
    """Raised when a remote fetch fails or answers with a non-success status."""

    default_code = "TRANSPORT_ERROR"
    default_status = 502

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(EmojiConsoleError):
    """Raised when remote or local data cannot be parsed."""

    default_code = "PARSE_ERROR"
    default_status = 502


def missing_emoji_base() -> PreconditionError:
    return PreconditionError(
        "emoji-base.json not found. Build the emoji base first.",
        code="MISSING_EMOJI_BASE",
    )


def invalid_set_key(set_key: str | None) -> PreconditionError:
    return PreconditionError(f"Invalid or missing set key: {set_key!r}", code="INVALID_SET_KEY")

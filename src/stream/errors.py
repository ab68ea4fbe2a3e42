"""Error types raised by the streaming pipeline and their classification."""

from src.models.schemas import ErrorCategory, ErrorSource, SessionError

NO_LIVE_UPDATES_MESSAGE = "No live updates available. Try another query."
APPLICATION_FALLBACK_MESSAGE = "The API returned an unsuccessful response."

MEMORY_INDICATOR = "memory"


class TransportError(Exception):
    """Raised when the query request fails at the HTTP level.

    Attributes:
        status_code: HTTP status of a non-success response, None for
            network failures.
        detail: Response body or underlying error text.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class StreamCancelled(Exception):
    """Raised when the caller cancelled the stream before it finished."""

    pass


def is_memory_exhaustion(*texts: str | None) -> bool:
    """Check whether any text reports a memory or resource limit."""
    return any(text and MEMORY_INDICATOR in text.lower() for text in texts)


def describe_error(
    message: str,
    source: ErrorSource,
    status_code: int | None = None,
    detail: str | None = None,
) -> SessionError:
    """Build the terminal error of a session.

    Args:
        message: User-facing message.
        source: Where the failure originated.
        status_code: HTTP status, if any.
        detail: Underlying error text, checked for memory exhaustion too.

    Returns:
        SessionError with its presentation category set.
    """
    category = (
        ErrorCategory.MEMORY_LIMIT
        if is_memory_exhaustion(message, detail)
        else ErrorCategory.GENERAL
    )
    return SessionError(
        message=message,
        source=source,
        category=category,
        status_code=status_code,
        detail=detail,
    )


def transport_failure(exc: TransportError) -> SessionError:
    return describe_error(
        NO_LIVE_UPDATES_MESSAGE,
        ErrorSource.TRANSPORT,
        status_code=exc.status_code,
        detail=exc.detail or str(exc),
    )

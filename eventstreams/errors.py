# =============================================================================
# EventStreams Client -- Error Types
# =============================================================================


class EventStreamsError(Exception):
    """Base exception for all eventstreams client errors."""


class HandlerError(EventStreamsError):
    """Handler cannot be used (not callable, wrong arity, undecodable type)."""


class DecodeError(EventStreamsError):
    """A single message payload could not be decoded into the record type."""


class SubscriptionActiveError(EventStreamsError):
    """The client already runs a subscription."""


class StreamConnectionError(EventStreamsError):
    """The stream kept failing until the retry budget ran out."""

    def __init__(self, url: str, attempts: int, reason: str = "") -> None:
        self.url = url
        self.attempts = attempts
        message = f"Stream {url} failed after {attempts} attempts"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

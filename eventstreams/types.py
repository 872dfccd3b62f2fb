# =============================================================================
# EventStreams Client -- Type Definitions
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .constants import (
    BACKOFF_FACTOR,
    BACKOFF_MAX_DELAY,
    BACKOFF_MIN_DELAY,
    MAX_RETRIES,
    RESET_INTERVAL,
)


class SubscriptionState(str, Enum):
    """Lifecycle of a client's subscription loop.

    Typical flow: IDLE -> CONNECTING -> STREAMING -> BACKING_OFF ->
    CONNECTING ... and finally CLOSED (clean end or stop) or FAILED
    (retries exhausted, handler rejected, handler raised).
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    BACKING_OFF = "backing_off"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass
class ReconnectConfig:
    """Configuration for reconnecting after a dropped stream.

    Attributes:
        min_delay: Delay in seconds before the first retry.
        max_delay: Upper bound for any single delay.
        factor: Multiplier per attempt.
        jitter: Randomize delays by +/-10%.
        max_retries: Consecutive failures tolerated before giving up.
        reset_interval: A failure arriving at least this many seconds after
            the last delivered message starts a fresh retry budget.
    """

    min_delay: float = BACKOFF_MIN_DELAY
    max_delay: float = BACKOFF_MAX_DELAY
    factor: float = BACKOFF_FACTOR
    jitter: bool = False
    max_retries: int = MAX_RETRIES
    reset_interval: float = RESET_INTERVAL

    def __post_init__(self) -> None:
        if self.min_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be non-negative")
        if self.factor < 1:
            raise ValueError("factor must be >= 1")
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")


@dataclass
class SubscriptionStats:
    """Counters for the current (or last) subscription."""

    messages_received: int = 0
    messages_delivered: int = 0
    empty_messages: int = 0
    decode_errors: int = 0
    reconnect_count: int = 0
    last_error: str | None = None

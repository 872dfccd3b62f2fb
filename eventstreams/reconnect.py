# =============================================================================
# EventStreams Client -- Reconnection Policy
# =============================================================================
#
# Decides what happens after a transport failure.  Shared by the blocking
# and the async client so both retry the same way.
# =============================================================================

from __future__ import annotations

from .backoff import Backoff
from .types import ReconnectConfig


class ReconnectPolicy:
    """Retry budget that refills when the stream was healthy long enough.

    The upstream gateway cycles idle and long-lived connections on a fixed
    schedule.  Failures that arrive at least ``reset_interval`` seconds after
    the last delivered message start from attempt zero; closer ones consume
    the budget until ``max_retries`` is reached.
    """

    def __init__(self, config: ReconnectConfig | None = None) -> None:
        self._config = config or ReconnectConfig()
        self._backoff = Backoff(self._config)

    @property
    def config(self) -> ReconnectConfig:
        return self._config

    @property
    def attempt(self) -> int:
        return self._backoff.attempt

    @property
    def exhausted(self) -> bool:
        return self._backoff.attempt >= self._config.max_retries

    def record_failure(self, elapsed_since_delivery: float | None) -> float:
        """Register a failure and return how long to wait before retrying.

        Args:
            elapsed_since_delivery: Seconds since the last delivered message,
                or ``None`` if nothing was delivered yet (never resets).
        """
        if (
            elapsed_since_delivery is not None
            and elapsed_since_delivery >= self._config.reset_interval
        ):
            self._backoff.reset()
        return self._backoff.duration()

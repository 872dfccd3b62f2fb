# =============================================================================
# EventStreams Client -- Resumption Cursor
# =============================================================================
#
# Two clocks live here.  The position is a wall-clock ISO-8601 string sent
# as ``since`` on reconnect; the liveness timestamp is monotonic and only
# feeds the backoff reset decision.
# =============================================================================

from __future__ import annotations

from datetime import UTC, datetime
from time import monotonic


def format_position(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{moment.microsecond // 1000:03d}Z"
    )


class ResumptionCursor:
    """Where to resume the stream, and when a message was last delivered."""

    def __init__(self, position: str | None = None) -> None:
        self._position = position or None
        self._delivered_at: datetime | None = None
        self._last_delivery: float | None = None

    @property
    def position(self) -> str | None:
        return self._position

    @property
    def has_delivered(self) -> bool:
        return self._last_delivery is not None

    def restart(self) -> None:
        """Forget the liveness timestamp, keeping the position."""
        self._last_delivery = None

    def mark_delivered(self) -> None:
        now = datetime.now(UTC)
        # Never move backwards, even if the wall clock does
        if self._delivered_at is not None and now < self._delivered_at:
            now = self._delivered_at
        self._delivered_at = now
        self._position = format_position(now)
        self._last_delivery = monotonic()

    def elapsed_since_delivery(self) -> float:
        """Seconds since the last delivery; 0.0 if nothing was delivered."""
        if self._last_delivery is None:
            return 0.0
        return max(0.0, monotonic() - self._last_delivery)

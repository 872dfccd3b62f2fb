# =============================================================================
# EventStreams Client -- Exponential Backoff
# =============================================================================

from __future__ import annotations

import random

from .constants import BACKOFF_JITTER
from .types import ReconnectConfig


class Backoff:
    """Attempt counter plus exponential delay.

    ``duration()`` returns ``min(max_delay, min_delay * factor**attempt)``
    for the current attempt and then moves to the next one.
    """

    def __init__(self, config: ReconnectConfig | None = None) -> None:
        self._config = config or ReconnectConfig()
        self._attempt = 0

    @property
    def attempt(self) -> int:
        return self._attempt

    def peek(self) -> float:
        """Delay for the current attempt without consuming it."""
        cfg = self._config
        delay = min(cfg.min_delay * (cfg.factor**self._attempt), cfg.max_delay)
        if cfg.jitter:
            jitter_amount = delay * 2 * BACKOFF_JITTER * (random.random() - 0.5)
            delay = max(0.0, delay + jitter_amount)
        return delay

    def duration(self) -> float:
        delay = self.peek()
        self._attempt += 1
        return delay

    def reset(self) -> None:
        self._attempt = 0

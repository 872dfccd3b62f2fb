"""Tests for exponential backoff."""

import pytest

from eventstreams.backoff import Backoff
from eventstreams.types import ReconnectConfig


class TestBackoff:
    def test_defaults_double_from_100ms(self):
        b = Backoff()
        assert b.duration() == pytest.approx(0.1)
        assert b.duration() == pytest.approx(0.2)
        assert b.duration() == pytest.approx(0.4)
        assert b.attempt == 3

    def test_capped_at_max_delay(self):
        b = Backoff(ReconnectConfig(min_delay=1.0, max_delay=5.0, factor=3.0))
        delays = [b.duration() for _ in range(4)]
        assert delays == [1.0, 3.0, 5.0, 5.0]

    def test_peek_does_not_consume(self):
        b = Backoff(ReconnectConfig(min_delay=1.0, factor=2.0))
        assert b.peek() == 1.0
        assert b.peek() == 1.0
        assert b.attempt == 0

    def test_reset(self):
        b = Backoff(ReconnectConfig(min_delay=1.0, factor=2.0))
        b.duration()
        b.duration()
        b.reset()
        assert b.attempt == 0
        assert b.duration() == 1.0

    def test_jitter_stays_within_ten_percent(self):
        b = Backoff(ReconnectConfig(min_delay=2.0, max_delay=2.0, jitter=True))
        for _ in range(50):
            assert 1.8 <= b.duration() <= 2.2

    def test_zero_delay(self):
        b = Backoff(ReconnectConfig(min_delay=0.0, max_delay=0.0))
        assert b.duration() == 0.0


class TestReconnectConfig:
    def test_defaults(self):
        cfg = ReconnectConfig()
        assert cfg.max_retries == 3
        assert cfg.reset_interval == 600.0
        assert cfg.jitter is False

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            ReconnectConfig(min_delay=-1.0)

    def test_rejects_shrinking_factor(self):
        with pytest.raises(ValueError):
            ReconnectConfig(factor=0.5)

    def test_rejects_zero_retries(self):
        with pytest.raises(ValueError):
            ReconnectConfig(max_retries=0)

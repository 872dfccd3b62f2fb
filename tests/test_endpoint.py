"""Tests for the endpoint builder."""

from eventstreams.endpoint import build_url


class TestBuildUrl:
    def test_without_cursor(self):
        url = build_url("https://x/stream", "changes", "")
        assert url == "https://x/stream/changes"

    def test_none_cursor(self):
        assert build_url("https://x/stream", "changes") == "https://x/stream/changes"

    def test_with_cursor(self):
        url = build_url("https://x/stream", "changes", "2024-01-01T00:00:00Z")
        assert url == "https://x/stream/changes?since=2024-01-01T00:00:00Z"

    def test_trailing_slash_on_base(self):
        assert build_url("https://x/stream/", "changes") == "https://x/stream/changes"

    def test_reserved_characters_encoded(self):
        url = build_url("https://x/stream", "changes", "2024-01-01T00:00:00+02:00")
        assert url == "https://x/stream/changes?since=2024-01-01T00:00:00%2B02:00"

    def test_ampersand_and_space_encoded(self):
        url = build_url("https://x/stream", "changes", "a&b c")
        assert url == "https://x/stream/changes?since=a%26b%20c"

    def test_composite_stream_keeps_comma(self):
        url = build_url("https://x/stream", "recentchange,revision-create")
        assert url == "https://x/stream/recentchange,revision-create"

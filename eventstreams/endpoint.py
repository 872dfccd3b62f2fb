# =============================================================================
# EventStreams Client -- Endpoint Builder
# =============================================================================

from __future__ import annotations

from urllib.parse import quote, urlencode

from .constants import SINCE_PARAM


def build_url(base: str, stream: str, since: str | None = None) -> str:
    """Compose ``base/stream[?since=cursor]``.

    >>> build_url("https://x/stream", "changes", "2024-01-01T00:00:00Z")
    'https://x/stream/changes?since=2024-01-01T00:00:00Z'
    """
    url = f"{base.rstrip('/')}/{quote(stream, safe=',')}"
    if since:
        url += "?" + urlencode({SINCE_PARAM: since}, safe=":", quote_via=quote)
    return url

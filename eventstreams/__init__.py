"""Python client for server-sent-event change streams.

Blocking usage::

    from eventstreams import Client, RecentChangeEvent

    def on_change(event: RecentChangeEvent) -> None:
        print(event.wiki, event.title)

    with Client() as client:
        client.subscribe("recentchange", on_change)

Async usage::

    from eventstreams import AsyncClient

    async with AsyncClient() as client:
        await client.subscribe("recentchange", on_change)

The handler's parameter annotation picks the record type each ``message``
event is decoded into.  Dropped connections are retried with exponential
backoff, resuming from the last delivered position.
"""

from ._version import __version__
from .async_client import AsyncClient
from .client import Client
from .constants import DEFAULT_URL
from .endpoint import build_url
from .errors import (
    DecodeError,
    EventStreamsError,
    HandlerError,
    StreamConnectionError,
    SubscriptionActiveError,
)
from .events import (
    RECENT_CHANGE,
    REVISION_CREATE,
    Meta,
    RecentChangeEvent,
    RevisionCreateEvent,
)
from .types import ReconnectConfig, SubscriptionState, SubscriptionStats


def new_client(base_url: str = DEFAULT_URL, **kwargs) -> Client:
    """Create a blocking :class:`Client`.

    Keyword arguments are forwarded to :class:`Client` -- common ones:
    ``since``, ``reconnect``, ``headers``, ``timeout``.
    """
    return Client(base_url, **kwargs)


__all__ = [
    "__version__",
    "new_client",
    "build_url",
    "Client",
    "AsyncClient",
    "ReconnectConfig",
    "SubscriptionState",
    "SubscriptionStats",
    "DEFAULT_URL",
    "RECENT_CHANGE",
    "REVISION_CREATE",
    "Meta",
    "RecentChangeEvent",
    "RevisionCreateEvent",
    "EventStreamsError",
    "HandlerError",
    "DecodeError",
    "StreamConnectionError",
    "SubscriptionActiveError",
]

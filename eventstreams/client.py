# =============================================================================
# EventStreams Client -- Blocking Client
# =============================================================================
#
# Primary public API.  One subscription loop per client: connect, dispatch
# every "message" event to the handler, and on transport failure back off
# and resume from the last delivered position.
# =============================================================================

from __future__ import annotations

import threading
from typing import Any, Callable, Self, TypeVar

import httpx
from httpx_sse import SSEError, connect_sse

from ._logging import logger
from .constants import (
    CONNECT_TIMEOUT,
    DEFAULT_URL,
    MESSAGE_EVENT,
    READ_TIMEOUT,
    USER_AGENT,
)
from .cursor import ResumptionCursor
from .dispatch import Dispatcher
from .endpoint import build_url
from .errors import HandlerError, StreamConnectionError, SubscriptionActiveError
from .reconnect import ReconnectPolicy
from .types import ReconnectConfig, SubscriptionState, SubscriptionStats

T = TypeVar("T")

# Errors that mean "the connection is gone", as opposed to handler bugs
TRANSPORT_ERRORS: tuple[type[Exception], ...] = (httpx.HTTPError, SSEError)


class BaseClient:
    """State and policy shared by :class:`Client` and ``AsyncClient``.

    Holds the base URL, the resumption cursor exposed through
    :meth:`last_position`, the recorded match predicates and the reconnect
    configuration.  Subclasses own the HTTP transport and the loop.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        *,
        since: str | None = None,
        reconnect: ReconnectConfig | None = None,
        timeout: httpx.Timeout | float | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url
        self._cursor = ResumptionCursor(since)
        self._predicates: dict[str, Any] = {}
        self._reconnect_cfg = reconnect or ReconnectConfig()
        if timeout is None:
            timeout = httpx.Timeout(READ_TIMEOUT, connect=CONNECT_TIMEOUT)
        self._timeout = timeout
        self._headers = {"User-Agent": USER_AGENT, **(headers or {})}

        self._state = SubscriptionState.IDLE
        self._stats = SubscriptionStats()

    # -- Properties -----------------------------------------------------------

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def stats(self) -> SubscriptionStats:
        return self._stats

    @property
    def reconnect_config(self) -> ReconnectConfig:
        return self._reconnect_cfg

    @property
    def predicates(self) -> dict[str, Any]:
        return dict(self._predicates)

    # -- Public API -----------------------------------------------------------

    def match(self, attribute: str, value: Any) -> Self:
        """Record a predicate on a JSON attribute.  Returns the client.

        Predicates are stored for callers that want to inspect them but are
        not applied to the stream: every message still reaches the handler.
        """
        self._predicates[attribute] = value
        return self

    def last_position(self) -> str | None:
        """Resumption cursor the next connection will send as ``since``.

        Feed it to a new client's ``since=`` to resume where this one
        stopped.
        """
        return self._cursor.position

    def url(self, stream: str) -> str:
        return build_url(self.base_url, stream, self._cursor.position)

    # -- Internal: shared loop steps ------------------------------------------

    def _prepare(
        self,
        handler: Callable[[T], Any],
        record_type: Any,
        *,
        asynchronous: bool = False,
    ) -> tuple[Dispatcher[T], ReconnectPolicy, ResumptionCursor]:
        """Validate the handler and build fresh per-subscription state.

        The cursor position outlives the call; only its liveness timestamp
        starts over.
        """
        self._stats = SubscriptionStats()
        try:
            dispatcher = Dispatcher(
                handler, record_type, stats=self._stats, asynchronous=asynchronous
            )
        except HandlerError:
            self._set_state(SubscriptionState.FAILED)
            raise
        self._cursor.restart()
        return dispatcher, ReconnectPolicy(self._reconnect_cfg), self._cursor

    def _mark_delivered(self, cursor: ResumptionCursor) -> None:
        cursor.mark_delivered()

    def _record_failure(
        self,
        policy: ReconnectPolicy,
        cursor: ResumptionCursor,
        url: str,
        exc: BaseException,
    ) -> float:
        self._stats.last_error = f"{type(exc).__name__}: {exc}"
        elapsed = cursor.elapsed_since_delivery() if cursor.has_delivered else None
        delay = policy.record_failure(elapsed)
        self._set_state(SubscriptionState.BACKING_OFF)
        logger.warning(
            "Stream %s dropped (%s), backing off %.2fs (attempt %d/%d)",
            url,
            self._stats.last_error,
            delay,
            policy.attempt,
            policy.config.max_retries,
        )
        return delay

    def _give_up(
        self, policy: ReconnectPolicy, url: str, exc: BaseException
    ) -> StreamConnectionError:
        self._set_state(SubscriptionState.FAILED)
        logger.error("Giving up on %s after %d attempts", url, policy.attempt)
        return StreamConnectionError(url, policy.attempt, str(exc))

    def _set_state(self, new_state: SubscriptionState) -> None:
        if new_state == self._state:
            return
        old = self._state
        self._state = new_state
        logger.debug("State: %s -> %s", old.value, new_state.value)


class Client(BaseClient):
    """Blocking client for one server-sent-event stream at a time.

    Args:
        base_url: Gateway URL without the stream name.
        since: Initial resumption cursor, e.g. ``"2024-01-01T00:00:00Z"``.
        reconnect: Backoff and retry budget.
        timeout: ``httpx`` timeout; defaults to 10s connect, 60s read.
        headers: Extra request headers.
        http_client: Pre-built ``httpx.Client``.  Not closed by
            :meth:`close` when supplied.

    Example::

        client = Client()

        def on_change(event: RecentChangeEvent) -> None:
            print(event.title)

        client.subscribe("recentchange", on_change)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        *,
        since: str | None = None,
        reconnect: ReconnectConfig | None = None,
        timeout: httpx.Timeout | float | None = None,
        headers: dict[str, str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(
            base_url, since=since, reconnect=reconnect, timeout=timeout, headers=headers
        )
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            timeout=self._timeout, follow_redirects=True
        )
        self._lock = threading.Lock()
        self._stop_event = threading.Event()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def stop(self) -> None:
        """Ask a running :meth:`subscribe` to return.

        Takes effect after the message being handled, or at once while
        waiting to reconnect.
        """
        self._stop_event.set()

    def close(self) -> None:
        self.stop()
        if self._owns_http:
            self._http.close()

    def subscribe(
        self,
        stream: str,
        handler: Callable[[T], Any],
        *,
        record_type: type[T] | Any | None = None,
    ) -> None:
        """Deliver every message of *stream* to *handler* until the stream ends.

        Blocks for the whole life of the subscription.  Returns ``None`` when
        the server ends the stream cleanly or :meth:`stop` is called.

        Raises:
            HandlerError: The handler is not a one-parameter callable or its
                parameter type cannot be decoded.  Raised before connecting.
            StreamConnectionError: The stream failed ``max_retries`` times
                without a reset in between.
            SubscriptionActiveError: Another ``subscribe`` is running on this
                client.
        """
        if not self._lock.acquire(blocking=False):
            raise SubscriptionActiveError("client already has an active subscription")
        try:
            self._stop_event.clear()
            dispatcher, policy, cursor = self._prepare(handler, record_type)
            self._run(stream, dispatcher, policy, cursor)
        finally:
            self._lock.release()

    # -- Internal -------------------------------------------------------------

    def _run(
        self,
        stream: str,
        dispatcher: Dispatcher[T],
        policy: ReconnectPolicy,
        cursor: ResumptionCursor,
    ) -> None:
        while True:
            url = self.url(stream)
            try:
                self._stream_once(url, dispatcher, cursor)
            except TRANSPORT_ERRORS as exc:
                error = exc
            except BaseException:
                self._set_state(SubscriptionState.FAILED)
                raise
            else:
                self._set_state(SubscriptionState.CLOSED)
                return

            if self._stop_event.is_set():
                self._set_state(SubscriptionState.CLOSED)
                return

            delay = self._record_failure(policy, cursor, url, error)
            if self._stop_event.wait(delay):
                self._set_state(SubscriptionState.CLOSED)
                return
            if policy.exhausted:
                raise self._give_up(policy, url, error) from error
            self._stats.reconnect_count += 1

    def _stream_once(
        self, url: str, dispatcher: Dispatcher[T], cursor: ResumptionCursor
    ) -> None:
        self._set_state(SubscriptionState.CONNECTING)
        logger.info("Connecting to %s", url)
        with connect_sse(self._http, "GET", url, headers=dict(self._headers)) as source:
            source.response.raise_for_status()
            self._set_state(SubscriptionState.STREAMING)
            for sse in source.iter_sse():
                if sse.event != MESSAGE_EVENT:
                    logger.debug("Ignoring %r event", sse.event)
                    continue
                if dispatcher.dispatch(sse.data):
                    self._mark_delivered(cursor)
                if self._stop_event.is_set():
                    return

# =============================================================================
# EventStreams Client -- Async Client
# =============================================================================
#
# Same subscription loop as client.Client on top of httpx.AsyncClient.
# Handlers may be plain functions or coroutine functions.
# =============================================================================

from __future__ import annotations

import asyncio
from typing import Any, Callable, TypeVar

import httpx
from httpx_sse import aconnect_sse

from ._logging import logger
from .client import TRANSPORT_ERRORS, BaseClient
from .constants import DEFAULT_URL, MESSAGE_EVENT
from .cursor import ResumptionCursor
from .dispatch import Dispatcher
from .errors import SubscriptionActiveError
from .reconnect import ReconnectPolicy
from .types import ReconnectConfig, SubscriptionState

T = TypeVar("T")


class AsyncClient(BaseClient):
    """Async client for one server-sent-event stream at a time.

    Takes the same arguments as :class:`~eventstreams.client.Client`, with
    *http_client* being an ``httpx.AsyncClient``.  Cancelling the task that
    awaits :meth:`subscribe` closes the connection and propagates
    ``CancelledError``.

    Example::

        async with AsyncClient() as client:
            await client.subscribe("recentchange", on_change)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        *,
        since: str | None = None,
        reconnect: ReconnectConfig | None = None,
        timeout: httpx.Timeout | float | None = None,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(
            base_url, since=since, reconnect=reconnect, timeout=timeout, headers=headers
        )
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self._timeout, follow_redirects=True
        )
        self._active = False
        self._stop_event = asyncio.Event()

    async def __aenter__(self) -> AsyncClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    def stop(self) -> None:
        """Ask a running :meth:`subscribe` to return at the next message."""
        self._stop_event.set()

    async def aclose(self) -> None:
        self.stop()
        if self._owns_http:
            await self._http.aclose()

    async def subscribe(
        self,
        stream: str,
        handler: Callable[[T], Any],
        *,
        record_type: type[T] | Any | None = None,
    ) -> None:
        """Deliver every message of *stream* to *handler* until the stream ends.

        See :meth:`eventstreams.client.Client.subscribe` for the return and
        error contract.
        """
        if self._active:
            raise SubscriptionActiveError("client already has an active subscription")
        self._active = True
        try:
            self._stop_event.clear()
            dispatcher, policy, cursor = self._prepare(
                handler, record_type, asynchronous=True
            )
            await self._run(stream, dispatcher, policy, cursor)
        finally:
            self._active = False

    # -- Internal -------------------------------------------------------------

    async def _run(
        self,
        stream: str,
        dispatcher: Dispatcher[T],
        policy: ReconnectPolicy,
        cursor: ResumptionCursor,
    ) -> None:
        while True:
            url = self.url(stream)
            try:
                await self._stream_once(url, dispatcher, cursor)
            except TRANSPORT_ERRORS as exc:
                error = exc
            except asyncio.CancelledError:
                self._set_state(SubscriptionState.CLOSED)
                raise
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
            try:
                stopped = await self._wait_for_stop(delay)
            except asyncio.CancelledError:
                self._set_state(SubscriptionState.CLOSED)
                raise
            if stopped:
                self._set_state(SubscriptionState.CLOSED)
                return
            if policy.exhausted:
                raise self._give_up(policy, url, error) from error
            self._stats.reconnect_count += 1

    async def _wait_for_stop(self, delay: float) -> bool:
        """Sleep for *delay*; True if :meth:`stop` was called meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def _stream_once(
        self, url: str, dispatcher: Dispatcher[T], cursor: ResumptionCursor
    ) -> None:
        self._set_state(SubscriptionState.CONNECTING)
        logger.info("Connecting to %s", url)
        async with aconnect_sse(
            self._http, "GET", url, headers=dict(self._headers)
        ) as source:
            source.response.raise_for_status()
            self._set_state(SubscriptionState.STREAMING)
            async for sse in source.aiter_sse():
                if sse.event != MESSAGE_EVENT:
                    logger.debug("Ignoring %r event", sse.event)
                    continue
                if await dispatcher.adispatch(sse.data):
                    self._mark_delivered(cursor)
                if self._stop_event.is_set():
                    return

# =============================================================================
# EventStreams Client -- Message Dispatcher
# =============================================================================
#
# Turns a raw ``data`` payload into the handler's record type and calls the
# handler.  The handler is inspected once; every message after that only
# pays for JSON parsing and validation.
# =============================================================================

from __future__ import annotations

import inspect
from typing import Any, Callable, Generic, TypeVar

import orjson
from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticUserError

from ._logging import logger
from .errors import DecodeError, HandlerError
from .types import SubscriptionStats

T = TypeVar("T")

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def resolve_record_type(handler: Callable[..., Any]) -> Any:
    """Return the declared type of the handler's single parameter.

    Raises:
        HandlerError: If *handler* is not a one-parameter callable or its
            annotation cannot be resolved.
    """
    if not callable(handler):
        raise HandlerError("handler must be callable")
    try:
        signature = inspect.signature(handler, eval_str=True)
    except (NameError, SyntaxError) as exc:
        raise HandlerError(f"cannot resolve handler annotations: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise HandlerError(f"cannot inspect handler: {exc}") from exc

    params = list(signature.parameters.values())
    if len(params) != 1 or params[0].kind not in _POSITIONAL:
        raise HandlerError("handler must take exactly one parameter")

    annotation = params[0].annotation
    if annotation is inspect.Parameter.empty:
        return Any
    return annotation


class Dispatcher(Generic[T]):
    """Decode payloads for one handler and invoke it.

    Args:
        handler: Callable taking exactly one positional parameter.  May be a
            coroutine function when used through :meth:`adispatch`.
        record_type: Decode target.  Defaults to the handler's parameter
            annotation, or plain JSON values when there is none.
        stats: Counters to update per message.
        asynchronous: Allow coroutine handlers.  Only :meth:`adispatch` can
            run them, so the blocking path rejects them up front.

    Raises:
        HandlerError: At construction, if the handler or the record type is
            unusable.  Nothing is retried after this.
    """

    def __init__(
        self,
        handler: Callable[[T], Any],
        record_type: type[T] | Any | None = None,
        *,
        stats: SubscriptionStats | None = None,
        asynchronous: bool = False,
    ) -> None:
        declared = resolve_record_type(handler)
        if not asynchronous and inspect.iscoroutinefunction(handler):
            raise HandlerError(
                "coroutine handlers need AsyncClient; Client cannot await them"
            )
        self._handler = handler
        self._stats = stats if stats is not None else SubscriptionStats()
        self._record_type = declared if record_type is None else record_type
        try:
            self._adapter: TypeAdapter[T] = TypeAdapter(self._record_type)
        except PydanticUserError as exc:
            raise HandlerError(
                f"handler parameter type {self._record_type!r} cannot be decoded"
            ) from exc

    @property
    def record_type(self) -> Any:
        return self._record_type

    @property
    def stats(self) -> SubscriptionStats:
        return self._stats

    def decode(self, payload: str | bytes) -> T:
        """Parse *payload* as JSON and validate it into the record type."""
        try:
            return self._adapter.validate_python(orjson.loads(payload))
        except orjson.JSONDecodeError as exc:
            raise DecodeError(f"malformed JSON: {exc}") from exc
        except ValidationError as exc:
            raise DecodeError(
                f"payload does not match {self._record_type!r}: "
                f"{exc.error_count()} validation errors"
            ) from exc

    def _prepare(self, payload: str | bytes | None) -> tuple[bool, T | None]:
        self._stats.messages_received += 1
        if not payload:
            self._stats.empty_messages += 1
            return False, None
        try:
            return True, self.decode(payload)
        except DecodeError as exc:
            self._stats.decode_errors += 1
            logger.warning("Skipping undecodable message: %s", exc)
            return False, None

    def dispatch(self, payload: str | bytes | None) -> bool:
        """Decode and deliver one message.

        Returns True when the handler ran, False when the message was empty
        or undecodable.  Exceptions from the handler propagate.
        """
        ok, record = self._prepare(payload)
        if not ok:
            return False
        result = self._handler(record)  # type: ignore[arg-type]
        if inspect.iscoroutine(result):
            # A plain callable that returned a coroutine; it would never run
            result.close()
            raise HandlerError("handler returned a coroutine; use AsyncClient")
        self._stats.messages_delivered += 1
        return True

    async def adispatch(self, payload: str | bytes | None) -> bool:
        """Async variant of :meth:`dispatch`; awaits coroutine handlers."""
        ok, record = self._prepare(payload)
        if not ok:
            return False
        result = self._handler(record)  # type: ignore[arg-type]
        if inspect.isawaitable(result):
            await result
        self._stats.messages_delivered += 1
        return True

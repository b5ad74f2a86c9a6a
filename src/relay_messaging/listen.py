"""ListenLoop — connect, receive, decode, dispatch, acknowledge; reconnect on failure."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar

from .envelope import Envelope
from .exceptions import MessagingDecodeError
from .outcome import Outcome, capture
from .policies import DecodeFailure, ListenPolicy
from .ports import scoped_session
from .retry import pause, retry
from .serialization import JsonCodec

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from .envelope import QueueHandle, RawMessage
    from .ports import ITransport

T = TypeVar("T")

_log = logging.getLogger(__name__)


class ListenState(Enum):
    CONNECTING = "connecting"
    RECEIVING = "receiving"
    DISPATCHING = "dispatching"


class ListenLoop(Generic[T]):
    """Deliver every message of one queue to an async callback, forever.

    Messages are acknowledged only after the callback returned, so delivery
    is at-least-once and callbacks must be idempotent. Transport errors and
    callback errors end the current session; the loop then reconnects
    according to ``policy.reconnect``. Decode failures follow
    ``policy.on_decode_error``.

    The loop only stops when its task is cancelled; the session is closed
    on the way out.
    """

    def __init__(
        self,
        transport: ITransport,
        destination: QueueHandle,
        callback: Callable[[T], Coroutine[Any, Any, None]],
        *,
        policy: ListenPolicy | None = None,
        codec: JsonCodec[T] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure the loop.

        Args:
            transport: Backend adapter.
            destination: Queue to consume.
            callback: Async callable invoked with each decoded payload.
            policy: Backend listen policy; default is sequential single-message.
            codec: Payload codec; default decodes JSON without a target type.
            logger: Injected logger; defaults to this module's logger.
        """
        self._transport = transport
        self._destination = destination
        self._callback = callback
        self._policy = policy or ListenPolicy()
        self._codec: JsonCodec[T] = codec or JsonCodec()
        self._log = logger or _log
        self._state = ListenState.CONNECTING
        self._cycles = 0

    @property
    def state(self) -> ListenState:
        return self._state

    @property
    def cycles(self) -> int:
        """Number of connect attempts made so far."""
        return self._cycles

    def _enter(self, state: ListenState) -> None:
        if state is not self._state:
            self._log.debug(
                "Listener %s: %s -> %s",
                self._destination.name,
                self._state.value,
                state.value,
            )
            self._state = state

    async def run(self) -> NoReturn:
        """Run until cancelled.

        Raises the last error only if a bounded reconnect policy is exhausted.
        """
        outcome = await retry(
            self._policy.reconnect,
            self._cycle,
            lambda _outcome: True,
        )
        raise outcome.error or RuntimeError("listen loop stopped")

    async def _cycle(self) -> Outcome[None]:
        """One Connecting -> (Receiving <-> Dispatching) pass; only fails."""
        self._cycles += 1
        self._enter(ListenState.CONNECTING)
        outcome = await capture(self._connected)
        if outcome.error is not None:
            self._log.error(
                "Failed to read from %s: %r",
                self._destination.name,
                outcome.error,
                exc_info=outcome.error,
            )
            await pause(self._policy.error_delay)
        return outcome

    async def _connected(self) -> None:
        async with scoped_session(self._transport, self._log) as session:
            self._log.debug("Listening on %s", self._destination.name)
            while True:
                self._enter(ListenState.RECEIVING)
                messages = await self._transport.receive(
                    session,
                    self._destination,
                    self._policy.max_batch,
                    self._policy.wait_timeout,
                )
                if not messages:
                    continue
                self._enter(ListenState.DISPATCHING)
                await self._dispatch_batch(session, messages)

    async def _dispatch_batch(self, session: Any, messages: list[RawMessage]) -> None:
        if self._policy.concurrent_dispatch and len(messages) > 1:
            results = await asyncio.gather(
                *(self._dispatch_one(session, m) for m in messages),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            return
        for message in messages:
            await self._dispatch_one(session, message)

    async def _dispatch_one(self, session: Any, message: RawMessage) -> None:
        try:
            payload = self._codec.decode(message.body)
        except MessagingDecodeError as e:
            if self._policy.on_decode_error is DecodeFailure.SKIP:
                # left unacknowledged; the queue redelivers or dead-letters it
                self._log.error(
                    "Failed to parse message %s from %s: %s",
                    message.message_id,
                    self._destination.name,
                    e,
                )
                return
            raise
        envelope: Envelope[T] = Envelope(payload=payload, raw=message)
        self._log.debug(
            "Received message %s from %s: %r",
            message.message_id,
            self._destination.name,
            envelope.payload,
        )
        await self._callback(envelope.payload)
        await self._transport.acknowledge(session, envelope.raw)


async def listen(
    transport: ITransport,
    destination: QueueHandle,
    callback: Callable[[T], Coroutine[Any, Any, None]],
    *,
    policy: ListenPolicy | None = None,
    codec: JsonCodec[T] | None = None,
    logger: logging.Logger | None = None,
) -> NoReturn:
    """Build a ListenLoop and run it until the calling task is cancelled."""
    loop = ListenLoop(
        transport,
        destination,
        callback,
        policy=policy,
        codec=codec,
        logger=logger,
    )
    await loop.run()

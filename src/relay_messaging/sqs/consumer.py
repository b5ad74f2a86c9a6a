"""SQSConsumer — long-poll a queue forever and dispatch batches concurrently."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NoReturn

from ..listen import ListenLoop
from ..policies import DecodeFailure, ListenPolicy
from ..retry import RECONNECT_RETRY
from ..serialization import JsonCodec
from .transport import MAX_BATCH, MAX_WAIT_TIME_SECONDS, SQSTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from ..envelope import QueueHandle
    from .connection import SQSConnectionManager

_log = logging.getLogger(__name__)

SQS_LISTEN_POLICY = ListenPolicy(
    reconnect=RECONNECT_RETRY,
    max_batch=MAX_BATCH,
    wait_timeout=MAX_WAIT_TIME_SECONDS,
    concurrent_dispatch=True,
    on_decode_error=DecodeFailure.SKIP,
    error_delay=3.0,
)


class SQSConsumer:
    """Consume SQS queues.

    Messages that fail to decode are logged and left on the queue, so the
    queue's redrive policy decides their fate. A message is deleted only
    after its callback returned.
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        *,
        policy: ListenPolicy | None = None,
        visibility_timeout: int | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure consumer.

        Args:
            connection: Shared connection manager.
            policy: Listen policy; default SQS_LISTEN_POLICY.
            visibility_timeout: Override the queue's visibility timeout.
            logger: Injected logger; a "sqs" child logger is used.
        """
        self._connection = connection
        self._policy = policy or SQS_LISTEN_POLICY
        self._log = (logger or _log).getChild("sqs")
        self._transport = SQSTransport(
            connection, visibility_timeout=visibility_timeout, logger=self._log
        )

    def loop(
        self,
        destination: QueueHandle,
        callback: Callable[[Any], Coroutine[Any, Any, None]],
        *,
        payload_type: Any = Any,
    ) -> ListenLoop[Any]:
        """Build the listen loop for *destination* without starting it."""
        return ListenLoop(
            self._transport,
            destination,
            callback,
            policy=self._policy,
            codec=JsonCodec(payload_type),
            logger=self._log,
        )

    async def listen(
        self,
        destination: QueueHandle,
        callback: Callable[[Any], Coroutine[Any, Any, None]],
        *,
        payload_type: Any = Any,
    ) -> NoReturn:
        """Run forever; stop by cancelling the task."""
        await self.loop(destination, callback, payload_type=payload_type).run()

    async def health_check(self) -> bool:
        """Return True if SQS is reachable."""
        return await self._connection.health_check()

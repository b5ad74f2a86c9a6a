"""RabbitMQConsumer — one delivery at a time, ack after the callback, reconnect on failure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NoReturn

from ..listen import ListenLoop
from ..policies import DecodeFailure, ListenPolicy
from ..retry import RECONNECT_RETRY
from ..serialization import JsonCodec
from .transport import RabbitMQTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from ..envelope import QueueHandle
    from .connection import RabbitMQConnectionManager

_log = logging.getLogger(__name__)

BROKER_LISTEN_POLICY = ListenPolicy(
    reconnect=RECONNECT_RETRY,
    max_batch=1,
    wait_timeout=1.0,
    concurrent_dispatch=False,
    on_decode_error=DecodeFailure.RECONNECT,
)


class RabbitMQConsumer:
    """Consume broker queues in client-ack mode.

    Any failure (an undecodable payload, a raising callback, a dropped
    connection) closes the connection, which hands unacknowledged messages
    back to the broker, and a new connection is opened after a constant
    delay. After enough failed deliveries the broker's dead-letter settings
    take the message out of circulation.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        *,
        policy: ListenPolicy | None = None,
        ack_timeout: float = 1.0,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure consumer.

        Args:
            connection: Connection manager used to open sessions.
            policy: Listen policy; default BROKER_LISTEN_POLICY.
            ack_timeout: Seconds an ack may take.
            logger: Injected logger; a "rabbitmq" child logger is used.
        """
        self._connection = connection
        self._policy = policy or BROKER_LISTEN_POLICY
        self._log = (logger or _log).getChild("rabbitmq")
        self._transport = RabbitMQTransport(
            connection, ack_timeout=ack_timeout, logger=self._log
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
        """Return True if the broker accepts connections."""
        return await self._connection.health_check()

"""RabbitMQPublisher — enqueue with publisher confirms; retry any transport failure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..enqueue import enqueue
from ..policies import SendPolicy, retry_on_transport_failure
from ..retry import BROKER_ENQUEUE_RETRY
from ..serialization import JsonCodec
from .transport import RabbitMQTransport

if TYPE_CHECKING:
    from ..config import RetryOverrides
    from ..envelope import QueueHandle
    from .connection import RabbitMQConnectionManager

_log = logging.getLogger(__name__)

BROKER_SEND_POLICY = SendPolicy(
    retry=BROKER_ENQUEUE_RETRY, is_retryable=retry_on_transport_failure
)


class RabbitMQPublisher:
    """Send JSON payloads to broker queues.

    Every attempt opens its own connection, publishes through the default
    exchange with the queue path as routing key and waits for the confirm.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        *,
        codec: JsonCodec[Any] | None = None,
        policy: SendPolicy | None = None,
        retry: RetryOverrides | None = None,
        confirm_timeout: float = 0.5,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure publisher.

        Args:
            connection: Connection manager used to open sessions.
            codec: Payload codec; default JsonCodec().
            policy: Send policy; default BROKER_SEND_POLICY.
            retry: Configured overrides for attempts/base delay.
            confirm_timeout: Seconds to wait for the broker confirm.
            logger: Injected logger; a "rabbitmq" child logger is used.
        """
        self._connection = connection
        self._codec = codec or JsonCodec()
        policy = policy or BROKER_SEND_POLICY
        if retry is not None:
            policy = policy.with_overrides(
                max_attempts=retry.max_attempts, base_delay=retry.base_delay
            )
        self._policy = policy
        self._log = (logger or _log).getChild("rabbitmq")
        self._transport = RabbitMQTransport(
            connection, confirm_timeout=confirm_timeout, logger=self._log
        )

    @property
    def policy(self) -> SendPolicy:
        return self._policy

    async def publish(self, destination: QueueHandle, payload: Any) -> Any:
        """Enqueue payload; raises the classified error after retries."""
        return await enqueue(
            self._transport,
            destination,
            payload,
            policy=self._policy,
            codec=self._codec,
            logger=self._log,
        )

    async def health_check(self) -> bool:
        """Return True if the broker accepts connections."""
        return await self._connection.health_check()

"""RabbitMQTransport — ITransport over a persistent AMQP connection with manual ack."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aio_pika
from aio_pika.exceptions import MessageProcessError

from ..envelope import RawMessage
from .errors import classify_amqp_error

if TYPE_CHECKING:
    from ..envelope import QueueHandle
    from .connection import BrokerSession, RabbitMQConnectionManager

_log = logging.getLogger(__name__)


class RabbitMQTransport:
    """AMQP adapter implementing ITransport.

    Sending waits for the broker's publisher confirm, so success means the
    broker accepted the message, not merely that it was written to the
    socket. Deliveries are pushed by the broker one at a time (prefetch 1)
    and are only acknowledged explicitly.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        *,
        confirm_timeout: float = 0.5,
        ack_timeout: float = 1.0,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure transport.

        Args:
            connection: Opens a new session per connect().
            confirm_timeout: Seconds to wait for a publisher confirm.
            ack_timeout: Seconds an ack may take.
            logger: Injected logger.
        """
        self._connection = connection
        self._confirm_timeout = confirm_timeout
        self._ack_timeout = ack_timeout
        self._log = logger or _log

    async def connect(self) -> BrokerSession:
        return await self._connection.open_session()

    async def send_raw(
        self, session: BrokerSession, destination: QueueHandle, body: bytes
    ) -> Any:
        message = aio_pika.Message(
            body=body,
            content_type="application/json",
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        )
        try:
            return await session.channel.default_exchange.publish(
                message,
                routing_key=destination.path,
                timeout=self._confirm_timeout,
            )
        except Exception as e:
            raise classify_amqp_error(e) from e

    async def receive(
        self,
        session: BrokerSession,
        destination: QueueHandle,
        max_batch: int,  # noqa: ARG002
        wait_timeout: float,
    ) -> list[RawMessage]:
        """Wait for the next pushed delivery; [] if none arrived in time."""
        try:
            await session.consume(destination.path)
            incoming = await asyncio.wait_for(session.inbox.get(), wait_timeout)
        except asyncio.TimeoutError:
            # An idle queue is not a failure: keep the session unless the
            # broker dropped it, then let the loop reconnect.
            session.raise_if_closed()
            return []
        except Exception as e:
            raise classify_amqp_error(e) from e
        return [
            RawMessage(
                body=incoming.body,
                ack_token=incoming,
                message_id=incoming.message_id or str(incoming.delivery_tag),
            )
        ]

    async def acknowledge(self, session: BrokerSession, message: RawMessage) -> None:  # noqa: ARG002
        # Acks are not confirmed; a lost ack only causes a redelivery, which
        # idempotent callbacks tolerate.
        incoming = message.ack_token
        try:
            await asyncio.wait_for(incoming.ack(), self._ack_timeout)
        except MessageProcessError:
            self._log.debug("Message %s was already acknowledged", message.message_id)
        except Exception as e:
            raise classify_amqp_error(e) from e

    async def close(self, session: BrokerSession) -> None:
        await self._connection.close_session(session)

    def __repr__(self) -> str:
        return "RabbitMQTransport()"

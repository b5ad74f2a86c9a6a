"""SQSPublisher — enqueue with SQS defaults: retry only timeouts and throttling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..enqueue import enqueue
from ..policies import SendPolicy, retry_on_transient
from ..retry import SQS_ENQUEUE_RETRY
from ..serialization import JsonCodec
from .transport import SQSTransport

if TYPE_CHECKING:
    from ..config import RetryOverrides
    from ..envelope import QueueHandle
    from .connection import SQSConnectionManager

_log = logging.getLogger(__name__)

SQS_SEND_POLICY = SendPolicy(retry=SQS_ENQUEUE_RETRY, is_retryable=retry_on_transient)


class SQSPublisher:
    """Send JSON payloads to SQS queues with bounded retry.

    Returns the SendMessage response (it carries ``MessageId``).
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        *,
        codec: JsonCodec[Any] | None = None,
        policy: SendPolicy | None = None,
        retry: RetryOverrides | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure publisher.

        Args:
            connection: Shared connection manager.
            codec: Payload codec; default JsonCodec().
            policy: Send policy; default SQS_SEND_POLICY.
            retry: Configured overrides for attempts/base delay.
            logger: Injected logger; a "sqs" child logger is used.
        """
        self._connection = connection
        self._codec = codec or JsonCodec()
        policy = policy or SQS_SEND_POLICY
        if retry is not None:
            policy = policy.with_overrides(
                max_attempts=retry.max_attempts, base_delay=retry.base_delay
            )
        self._policy = policy
        self._log = (logger or _log).getChild("sqs")
        self._transport = SQSTransport(connection, logger=self._log)

    @property
    def policy(self) -> SendPolicy:
        return self._policy

    async def publish(self, destination: QueueHandle, payload: Any) -> Any:
        """Enqueue payload; raises the classified error after retries."""
        session = await self._transport.connect()
        return await enqueue(
            self._transport,
            destination,
            payload,
            policy=self._policy,
            codec=self._codec,
            session=session,
            logger=self._log,
        )

    async def health_check(self) -> bool:
        """Return True if SQS is reachable."""
        return await self._connection.health_check()

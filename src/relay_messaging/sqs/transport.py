"""SQSTransport — ITransport over SQS long-polling and per-message delete."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..envelope import RawMessage
from .errors import INVALID_RECEIPT_CODES, classify_aws_error, error_code

if TYPE_CHECKING:
    from ..envelope import QueueHandle
    from .connection import SQSConnectionManager

_log = logging.getLogger(__name__)

MAX_WAIT_TIME_SECONDS = 20
MAX_BATCH = 10


class SQSTransport:
    """SQS adapter implementing ITransport.

    The "session" is the shared aiobotocore client: connecting only makes
    sure it exists and closing a session leaves it open for other tasks.
    The SendMessage response is the delivery confirmation. Acknowledging
    deletes the message by receipt handle, one message at a time.
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        *,
        visibility_timeout: int | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure transport.

        Args:
            connection: Shared connection manager.
            visibility_timeout: Override the queue's visibility timeout on receive.
            logger: Injected logger.
        """
        self._connection = connection
        self._visibility_timeout = visibility_timeout
        self._log = logger or _log

    async def connect(self) -> Any:
        return await self._connection.get_client()

    async def send_raw(self, session: Any, destination: QueueHandle, body: bytes) -> Any:
        send_kwargs: dict[str, Any] = {
            "QueueUrl": destination.path,
            "MessageBody": body.decode("utf-8"),
        }
        try:
            return await session.send_message(**send_kwargs)
        except Exception as e:
            raise classify_aws_error(e) from e

    async def receive(
        self,
        session: Any,
        destination: QueueHandle,
        max_batch: int,
        wait_timeout: float,
    ) -> list[RawMessage]:
        receive_kwargs: dict[str, Any] = {
            "QueueUrl": destination.path,
            "MaxNumberOfMessages": max(1, min(max_batch, MAX_BATCH)),
            "WaitTimeSeconds": max(0, min(int(wait_timeout), MAX_WAIT_TIME_SECONDS)),
        }
        if self._visibility_timeout is not None:
            receive_kwargs["VisibilityTimeout"] = self._visibility_timeout
        try:
            out = await session.receive_message(**receive_kwargs)
        except Exception as e:
            raise classify_aws_error(e) from e
        messages = []
        for msg in out.get("Messages", []):
            body = msg.get("Body", "")
            messages.append(
                RawMessage(
                    body=body.encode("utf-8") if isinstance(body, str) else body,
                    ack_token=(destination.path, msg.get("ReceiptHandle")),
                    message_id=msg.get("MessageId"),
                )
            )
        return messages

    async def acknowledge(self, session: Any, message: RawMessage) -> None:
        queue_url, receipt = message.ack_token
        if receipt is None:
            return
        try:
            await session.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt)
        except Exception as e:
            if error_code(e) in INVALID_RECEIPT_CODES:
                self._log.debug(
                    "Receipt handle for %s no longer valid; already deleted?",
                    message.message_id,
                )
                return
            raise classify_aws_error(e) from e

    async def close(self, session: Any) -> None:  # noqa: ARG002
        """The shared client outlives sessions; see SQSConnectionManager.close()."""

    def __repr__(self) -> str:
        return "SQSTransport()"

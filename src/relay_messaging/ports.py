"""ITransport — the capability a queue backend adapter provides."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from .envelope import QueueHandle, RawMessage

_log = logging.getLogger(__name__)


@runtime_checkable
class ITransport(Protocol):
    """
    Port implemented once per queue backend (SQS, AMQP broker, in-memory).

    The generic enqueue and listen operations only ever talk to a backend
    through these methods. A session returned by ``connect`` is used by one
    task at a time.
    """

    async def connect(self) -> Any:
        """
        Establish a session. Raises MessagingConnectionError on failure.
        """
        ...

    async def send_raw(self, session: Any, destination: QueueHandle, body: bytes) -> Any:
        """
        Send one payload and wait until the backend confirmed receipt.

        Returns the backend's confirmation. Raises a classified MessagingError.
        """
        ...

    async def receive(
        self,
        session: Any,
        destination: QueueHandle,
        max_batch: int,
        wait_timeout: float,
    ) -> list[RawMessage]:
        """
        Wait up to *wait_timeout* seconds for messages.

        Returns an empty list when nothing arrived in time.
        """
        ...

    async def acknowledge(self, session: Any, message: RawMessage) -> None:
        """
        Mark *message* as processed. Acknowledging twice is a no-op.
        """
        ...

    async def close(self, session: Any) -> None:
        """
        Release the session.
        """
        ...


@asynccontextmanager
async def scoped_session(
    transport: ITransport,
    logger: logging.Logger | None = None,
) -> AsyncIterator[Any]:
    """Connect, yield the session and close it on every exit path.

    A failing ``close`` is logged; it never replaces the error that ended
    the block.
    """
    log = logger or _log
    session = await transport.connect()
    try:
        yield session
    finally:
        try:
            await transport.close(session)
        except Exception as exc:  # noqa: BLE001
            log.warning("Error closing session on %r: %s", transport, exc)

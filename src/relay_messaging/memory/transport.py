"""InMemoryTransport — ITransport over InMemoryQueueBroker with scriptable failures."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..envelope import RawMessage
from ..exceptions import MessagingConnectionError
from .broker import InMemoryQueueBroker

if TYPE_CHECKING:
    from ..envelope import QueueHandle


@dataclass
class InMemorySession:
    """One connection to the in-memory broker."""

    session_id: int
    closed: bool = False
    unacked: list[str] = field(default_factory=list)


class InMemoryTransport:
    """In-memory transport implementing ITransport.

    ``fail_connect`` and ``fail_send`` hold exceptions to raise, consumed
    one per call, so tests can script "time out twice then succeed".
    Closing a session requeues whatever it received but did not acknowledge,
    like a broker does when a consumer connection drops.
    """

    def __init__(
        self,
        broker: InMemoryQueueBroker | None = None,
        *,
        redeliver_on_close: bool = True,
    ) -> None:
        self._broker = broker or InMemoryQueueBroker()
        self._redeliver_on_close = redeliver_on_close
        self._ids = itertools.count(1)
        self.fail_connect: list[BaseException] = []
        self.fail_send: list[BaseException] = []
        self.opened: list[InMemorySession] = []
        self.closed: list[InMemorySession] = []
        self.send_attempts = 0

    @property
    def broker(self) -> InMemoryQueueBroker:
        return self._broker

    async def connect(self) -> InMemorySession:
        if self.fail_connect:
            raise self.fail_connect.pop(0)
        session = InMemorySession(session_id=next(self._ids))
        self.opened.append(session)
        return session

    async def send_raw(
        self, session: InMemorySession, destination: QueueHandle, body: bytes
    ) -> str:
        self._check_open(session)
        self.send_attempts += 1
        if self.fail_send:
            raise self.fail_send.pop(0)
        return self._broker.put(destination.path, body)

    async def receive(
        self,
        session: InMemorySession,
        destination: QueueHandle,
        max_batch: int,
        wait_timeout: float,
    ) -> list[RawMessage]:
        self._check_open(session)
        if not self._broker.pending(destination.path):
            await self._broker.wait_for_messages(destination.path, wait_timeout)
        batch = self._broker.take(destination.path, max_batch)
        session.unacked.extend(message_id for message_id, _ in batch)
        return [
            RawMessage(body=body, ack_token=message_id, message_id=message_id)
            for message_id, body in batch
        ]

    async def acknowledge(self, session: InMemorySession, message: RawMessage) -> None:
        self._check_open(session)
        if self._broker.ack(message.ack_token) and message.ack_token in session.unacked:
            session.unacked.remove(message.ack_token)

    async def close(self, session: InMemorySession) -> None:
        if session.closed:
            return
        session.closed = True
        self.closed.append(session)
        if self._redeliver_on_close:
            self._broker.requeue(session.unacked)
        session.unacked.clear()

    def _check_open(self, session: InMemorySession) -> None:
        if session.closed:
            raise MessagingConnectionError(f"session {session.session_id} is closed")

"""In-memory queue broker for testing — named queues with redelivery of unacked messages."""

from __future__ import annotations

import asyncio
import itertools
from collections import deque


class InMemoryQueueBroker:
    """Shared broker state: pending bodies per queue path, deliveries and acks.

    A message taken by ``take`` stays in flight until ``ack``; ``requeue``
    puts in-flight messages back at the front of their queue, which is what
    happens when a consumer session is closed without acknowledging. With
    ``max_deliveries`` set, a message that was delivered that many times is
    moved to ``dead_letters`` instead of being requeued.
    """

    def __init__(self, *, max_deliveries: int | None = None) -> None:
        self._max_deliveries = max_deliveries
        self._queues: dict[str, deque[tuple[str, bytes]]] = {}
        self._ready: dict[str, asyncio.Event] = {}
        self._in_flight: dict[str, tuple[str, bytes]] = {}
        self._deliveries: dict[str, int] = {}
        self._ids = itertools.count(1)
        self.sent: list[tuple[str, bytes]] = []
        self.delivered: list[str] = []
        self.acked: list[str] = []
        self.dead_letters: list[tuple[str, bytes]] = []

    def _event(self, path: str) -> asyncio.Event:
        return self._ready.setdefault(path, asyncio.Event())

    def put(self, path: str, body: bytes) -> str:
        """Append a message to the queue and return its message id."""
        message_id = f"m-{next(self._ids)}"
        self._queues.setdefault(path, deque()).append((message_id, body))
        self.sent.append((path, body))
        self._event(path).set()
        return message_id

    def take(self, path: str, max_batch: int) -> list[tuple[str, bytes]]:
        """Remove up to max_batch messages from the queue and mark them in flight."""
        queue = self._queues.get(path)
        batch: list[tuple[str, bytes]] = []
        while queue and len(batch) < max_batch:
            message_id, body = queue.popleft()
            self._in_flight[message_id] = (path, body)
            self._deliveries[message_id] = self._deliveries.get(message_id, 0) + 1
            self.delivered.append(message_id)
            batch.append((message_id, body))
        if not queue:
            self._event(path).clear()
        return batch

    async def wait_for_messages(self, path: str, timeout: float) -> None:
        """Wait until the queue has a message, at most *timeout* seconds."""
        try:
            await asyncio.wait_for(self._event(path).wait(), timeout)
        except asyncio.TimeoutError:
            return

    def ack(self, message_id: str) -> bool:
        """Acknowledge an in-flight message. Returns False if it was not in flight."""
        if self._in_flight.pop(message_id, None) is None:
            return False
        self.acked.append(message_id)
        return True

    def requeue(self, message_ids: list[str]) -> None:
        """Return in-flight messages to the front of their queues."""
        for message_id in reversed(message_ids):
            entry = self._in_flight.pop(message_id, None)
            if entry is None:
                continue
            path, body = entry
            if (
                self._max_deliveries is not None
                and self._deliveries.get(message_id, 0) >= self._max_deliveries
            ):
                self.dead_letters.append((path, body))
                continue
            self._queues.setdefault(path, deque()).appendleft((message_id, body))
            self._event(path).set()

    def pending(self, path: str) -> int:
        return len(self._queues.get(path, ()))

    @property
    def in_flight(self) -> list[str]:
        return list(self._in_flight)

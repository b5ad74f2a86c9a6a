"""In-memory transport for testing."""

from __future__ import annotations

from .broker import InMemoryQueueBroker
from .transport import InMemorySession, InMemoryTransport

__all__ = [
    "InMemoryQueueBroker",
    "InMemorySession",
    "InMemoryTransport",
]

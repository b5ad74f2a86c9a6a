"""Queue handles, raw messages and decoded envelopes."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class QueueHandle(BaseModel):
    """Immutable destination: a diagnostic name and the backend path or URL."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Queue identifier, used only for logging")
    path: str = Field(..., description="Queue URL (SQS) or queue path (broker)")

    def __str__(self) -> str:
        return self.name


class RawMessage(BaseModel):
    """Opaque payload bytes plus whatever the backend needs to acknowledge them.

    ``ack_token`` is a receipt handle for SQS and the incoming message object
    for the broker; it is only ever interpreted by the transport that
    produced it.
    """

    model_config = ConfigDict(frozen=True)

    body: bytes
    ack_token: Any = None
    message_id: str | None = None


class Envelope(BaseModel, Generic[T]):
    """A successfully decoded payload that still carries its ack token."""

    model_config = ConfigDict(frozen=True)

    payload: T
    raw: RawMessage

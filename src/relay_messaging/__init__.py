"""Reliable at-least-once send and receive over SQS and AMQP broker queues.

The operations live in their own modules: ``relay_messaging.enqueue.enqueue``,
``relay_messaging.listen.listen`` and ``relay_messaging.retry.retry``.
"""

from __future__ import annotations

from .config import (
    AWSEndpoint,
    BrokerOptions,
    Credentials,
    RetryOverrides,
    SQSOptions,
)
from .envelope import Envelope, QueueHandle, RawMessage
from .exceptions import (
    DestinationValidationError,
    MessagingConnectionError,
    MessagingDecodeError,
    MessagingError,
    MessagingSerializationError,
    MessagingThrottlingError,
    MessagingTimeoutError,
    UnclassifiedMessagingError,
)
from .listen import ListenLoop, ListenState
from .memory import InMemoryQueueBroker, InMemoryTransport
from .outcome import Outcome
from .policies import DecodeFailure, ListenPolicy, SendPolicy
from .ports import ITransport, scoped_session
from .retry import RetryPolicy
from .serialization import JsonCodec

__all__ = [
    "AWSEndpoint",
    "BrokerOptions",
    "Credentials",
    "DecodeFailure",
    "DestinationValidationError",
    "Envelope",
    "ITransport",
    "InMemoryQueueBroker",
    "InMemoryTransport",
    "JsonCodec",
    "ListenLoop",
    "ListenPolicy",
    "ListenState",
    "MessagingConnectionError",
    "MessagingDecodeError",
    "MessagingError",
    "MessagingSerializationError",
    "MessagingThrottlingError",
    "MessagingTimeoutError",
    "Outcome",
    "QueueHandle",
    "RawMessage",
    "RetryOverrides",
    "RetryPolicy",
    "SQSOptions",
    "SendPolicy",
    "UnclassifiedMessagingError",
    "scoped_session",
]

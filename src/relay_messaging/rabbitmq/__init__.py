"""AMQP broker transport adapter (optional extra: relay-messaging[rabbitmq])."""

from __future__ import annotations

from .connection import BrokerSession, RabbitMQConnectionManager
from .consumer import BROKER_LISTEN_POLICY, RabbitMQConsumer
from .errors import classify_amqp_error
from .publisher import BROKER_SEND_POLICY, RabbitMQPublisher
from .transport import RabbitMQTransport

__all__ = [
    "BROKER_LISTEN_POLICY",
    "BROKER_SEND_POLICY",
    "BrokerSession",
    "RabbitMQConnectionManager",
    "RabbitMQConsumer",
    "RabbitMQPublisher",
    "RabbitMQTransport",
    "classify_amqp_error",
]

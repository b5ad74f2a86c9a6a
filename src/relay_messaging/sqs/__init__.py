"""SQS transport adapter (optional extra: relay-messaging[sqs])."""

from __future__ import annotations

from .connection import SQSConnectionManager
from .consumer import SQS_LISTEN_POLICY, SQSConsumer
from .errors import classify_aws_error
from .publisher import SQS_SEND_POLICY, SQSPublisher
from .transport import SQSTransport

__all__ = [
    "SQS_LISTEN_POLICY",
    "SQS_SEND_POLICY",
    "SQSConnectionManager",
    "SQSConsumer",
    "SQSPublisher",
    "SQSTransport",
    "classify_aws_error",
]

"""Map botocore / aiobotocore failures onto the messaging error taxonomy."""

from __future__ import annotations

import asyncio

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ReadTimeoutError,
)

from ..exceptions import (
    DestinationValidationError,
    MessagingConnectionError,
    MessagingError,
    MessagingThrottlingError,
    MessagingTimeoutError,
    UnclassifiedMessagingError,
)

THROTTLING_CODES = frozenset(
    {
        "RequestThrottled",
        "Throttling",
        "ThrottlingException",
        "AWS.SimpleQueueService.RequestThrottled",
    }
)

INVALID_RECEIPT_CODES = frozenset(
    {
        "ReceiptHandleIsInvalid",
        "InvalidReceiptHandle",
        "AWS.SimpleQueueService.ReceiptHandleIsInvalid",
    }
)

NONEXISTENT_QUEUE_CODES = frozenset(
    {
        "AWS.SimpleQueueService.NonExistentQueue",
        "QueueDoesNotExist",
    }
)

_INVALID_DOMAIN = "Invalid domain name"


def error_code(exc: BaseException) -> str | None:
    """Return the AWS error code of a ClientError-like exception."""
    err = getattr(exc, "response", None) or {}
    code = err.get("Error", {}).get("Code")
    return str(code) if code is not None else None


def _status(exc: BaseException) -> int | None:
    err = getattr(exc, "response", None) or {}
    status = err.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return int(status) if status is not None else None


def _message(exc: BaseException) -> str:
    err = getattr(exc, "response", None) or {}
    return str(err.get("Error", {}).get("Message") or "")


def classify_aws_error(exc: BaseException) -> MessagingError:
    """Return the taxonomy error for *exc* (already classified errors pass through)."""
    if isinstance(exc, MessagingError):
        return exc
    if isinstance(
        exc,
        (
            ConnectTimeoutError,
            EndpointConnectionError,
            NoCredentialsError,
            PartialCredentialsError,
        ),
    ):
        return MessagingConnectionError(str(exc))
    if isinstance(exc, (ReadTimeoutError, asyncio.TimeoutError)):
        return MessagingTimeoutError(str(exc) or "AWS request timed out")
    if isinstance(exc, ClientError):
        code = error_code(exc) or ""
        if code in THROTTLING_CODES:
            return MessagingThrottlingError(str(exc))
        # SES rejects some domains that pass RFC 5322 syntax checks; report
        # those as a client error instead of an infrastructure failure.
        if _status(exc) == 400 and (
            code.startswith(_INVALID_DOMAIN) or _message(exc).startswith(_INVALID_DOMAIN)
        ):
            return DestinationValidationError(str(exc), code=code)
    return UnclassifiedMessagingError(str(exc), cause=exc)

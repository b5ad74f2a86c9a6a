"""Map aio-pika / aiormq failures onto the messaging error taxonomy."""

from __future__ import annotations

import asyncio

from aio_pika.exceptions import AMQPError, DeliveryError

from ..exceptions import (
    MessagingConnectionError,
    MessagingError,
    MessagingTimeoutError,
    UnclassifiedMessagingError,
)


def classify_amqp_error(exc: BaseException, *, connecting: bool = False) -> MessagingError:
    """Return the taxonomy error for *exc*.

    While *connecting*, any network, AMQP or timeout failure means no session
    could be established. Once a session exists, a dropped connection or
    closed channel is an ordinary transport failure of the current request.
    """
    if isinstance(exc, MessagingError):
        return exc
    if connecting and isinstance(
        exc, (AMQPError, asyncio.TimeoutError, ConnectionError, OSError, ValueError)
    ):
        return MessagingConnectionError(str(exc) or type(exc).__name__)
    if isinstance(exc, asyncio.TimeoutError):
        return MessagingTimeoutError(str(exc) or "broker request timed out")
    if isinstance(exc, DeliveryError):
        return UnclassifiedMessagingError(f"broker rejected message: {exc}", cause=exc)
    return UnclassifiedMessagingError(str(exc) or type(exc).__name__, cause=exc)

"""enqueue — send one payload with broker confirmation and bounded retry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import MessagingError, UnclassifiedMessagingError
from .outcome import Outcome, capture
from .ports import scoped_session
from .retry import retry
from .serialization import JsonCodec

if TYPE_CHECKING:
    from .envelope import QueueHandle
    from .policies import SendPolicy
    from .ports import ITransport

T = TypeVar("T")

_log = logging.getLogger(__name__)


async def enqueue(
    transport: ITransport,
    destination: QueueHandle,
    payload: T,
    *,
    policy: SendPolicy,
    codec: JsonCodec[T] | None = None,
    session: Any = None,
    logger: logging.Logger | None = None,
) -> Any:
    """Encode *payload*, send it and return the backend confirmation.

    With *session* every attempt reuses it; otherwise each attempt opens and
    closes its own session. Failed attempts are retried while
    ``policy.is_retryable`` accepts the error and the retry policy allows.
    The last classified error is raised once retries are exhausted; a
    connection failure is raised at once.

    A raised error does not prove the message was not enqueued.
    """
    log = logger or _log
    body = (codec or JsonCodec()).encode(payload)
    attempts = 0

    async def send_once() -> Any:
        if session is not None:
            return await transport.send_raw(session, destination, body)
        async with scoped_session(transport, log) as s:
            return await transport.send_raw(s, destination, body)

    async def attempt() -> Outcome[Any]:
        nonlocal attempts
        attempts += 1
        outcome = await capture(send_once)
        if not outcome.ok:
            log.warning(
                "Enqueue to %s failed (attempt %d): %r",
                destination.name,
                attempts,
                outcome.error,
            )
        return outcome

    def should_retry(outcome: Outcome[Any]) -> bool:
        return outcome.error is not None and policy.is_retryable(outcome.error)

    outcome = await retry(policy.retry, attempt, should_retry)
    if outcome.error is not None:
        log.error(
            "Giving up enqueue to %s after %d attempt(s): %s",
            destination.name,
            attempts,
            outcome.error,
        )
        if not isinstance(outcome.error, MessagingError):
            raise UnclassifiedMessagingError(
                str(outcome.error), cause=outcome.error
            ) from outcome.error
        raise outcome.error
    log.debug("Enqueued message to %s after %d attempt(s)", destination.name, attempts)
    return outcome.value

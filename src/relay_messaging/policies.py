"""Per-backend send and listen policies fed into the generic operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .exceptions import (
    DestinationValidationError,
    MessagingConnectionError,
    MessagingError,
    MessagingSerializationError,
    MessagingThrottlingError,
    MessagingTimeoutError,
)
from .retry import RECONNECT_RETRY, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable


class DecodeFailure(Enum):
    """What the listen loop does with a payload that fails to decode."""

    SKIP = "skip"
    RECONNECT = "reconnect"


def retry_on_transient(error: BaseException) -> bool:
    """Retry only timeouts and throttling."""
    return isinstance(error, (MessagingTimeoutError, MessagingThrottlingError))


def retry_on_transport_failure(error: BaseException) -> bool:
    """Retry any transport failure once a session exists."""
    if isinstance(
        error,
        (
            MessagingConnectionError,
            MessagingSerializationError,
            DestinationValidationError,
        ),
    ):
        return False
    return isinstance(error, MessagingError)


@dataclass(frozen=True)
class SendPolicy:
    """Retry schedule and retry classification for enqueue."""

    retry: RetryPolicy
    is_retryable: Callable[[BaseException], bool] = retry_on_transient

    def with_overrides(
        self,
        *,
        max_attempts: int | None = None,
        base_delay: float | None = None,
    ) -> SendPolicy:
        return SendPolicy(
            retry=self.retry.with_overrides(
                max_attempts=max_attempts, base_delay=base_delay
            ),
            is_retryable=self.is_retryable,
        )


@dataclass(frozen=True)
class ListenPolicy:
    """How a listen loop receives, dispatches and recovers for one backend.

    Attributes:
        reconnect: Delay schedule between connect cycles.
        max_batch: Messages requested per receive.
        wait_timeout: Seconds a single receive may block.
        concurrent_dispatch: Run callbacks of one batch concurrently.
        on_decode_error: Skip the message (left unacknowledged) or reconnect.
        error_delay: Extra pause after an unexpected error, before reconnecting.
    """

    reconnect: RetryPolicy = RECONNECT_RETRY
    max_batch: int = 1
    wait_timeout: float = 1.0
    concurrent_dispatch: bool = False
    on_decode_error: DecodeFailure = DecodeFailure.RECONNECT
    error_delay: float = 0.0

    def __post_init__(self) -> None:
        if self.max_batch < 1:
            raise ValueError("max_batch must be >= 1")
        if self.wait_timeout < 0 or self.error_delay < 0:
            raise ValueError("wait_timeout and error_delay must be >= 0")

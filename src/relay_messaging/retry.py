"""RetryPolicy and the retry engine — bounded or unbounded, exponential or constant."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Literal, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .outcome import Outcome

T = TypeVar("T")

Backoff = Literal["exponential", "constant"]


class RetryPolicy:
    """Configurable retry with exponential or constant backoff."""

    def __init__(
        self,
        *,
        max_attempts: int | None = 5,
        base_delay: float = 1.0,
        max_delay: float | None = 60.0,
        backoff: Backoff = "exponential",
        jitter: bool = False,
    ) -> None:
        """Configure retry behavior.

        Args:
            max_attempts: Maximum number of attempts (including first).
                None means unbounded.
            base_delay: Delay in seconds after the first failed attempt.
            max_delay: Cap on delay in seconds; None disables the cap.
            backoff: "exponential" doubles the delay per attempt,
                "constant" always waits base_delay.
            jitter: If True, multiply delays by a random factor in [0.5, 1.5]
                (still capped by max_delay).
        """
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if base_delay < 0 or (max_delay is not None and max_delay < 0):
            raise ValueError("base_delay and max_delay must be >= 0")
        if max_delay is not None and base_delay > max_delay:
            raise ValueError("base_delay must be <= max_delay")
        if backoff not in ("exponential", "constant"):
            raise ValueError(f"unknown backoff {backoff!r}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff = backoff
        self.jitter = jitter

    @classmethod
    def exponential(
        cls,
        base_delay: float,
        *,
        max_attempts: int | None = 5,
        max_delay: float | None = None,
    ) -> RetryPolicy:
        return cls(
            max_attempts=max_attempts,
            base_delay=base_delay,
            max_delay=max_delay,
            backoff="exponential",
        )

    @classmethod
    def constant(cls, delay: float, *, max_attempts: int | None = None) -> RetryPolicy:
        return cls(
            max_attempts=max_attempts,
            base_delay=delay,
            max_delay=None,
            backoff="constant",
        )

    @property
    def unbounded(self) -> bool:
        return self.max_attempts is None

    def with_overrides(
        self,
        *,
        max_attempts: int | None = None,
        base_delay: float | None = None,
    ) -> RetryPolicy:
        """Return a copy with configured values replacing the defaults."""
        base = self.base_delay if base_delay is None else base_delay
        cap = self.max_delay
        if cap is not None and base > cap:
            cap = base
        return RetryPolicy(
            max_attempts=self.max_attempts if max_attempts is None else max_attempts,
            base_delay=base,
            max_delay=cap,
            backoff=self.backoff,
            jitter=self.jitter,
        )

    def should_retry(self, attempt: int) -> bool:
        """Return True if another attempt is allowed (attempt is 1-based)."""
        if attempt < 1:
            return False
        return self.max_attempts is None or attempt < self.max_attempts

    def delay_for_attempt(self, attempt: int) -> float:
        """Return delay in seconds after the given failed 1-based attempt.

        Exponential: base_delay * 2^(attempt-1), capped by max_delay.
        Constant: base_delay.
        """
        if attempt < 1:
            return 0.0
        if self.backoff == "constant":
            delay = self.base_delay
        else:
            delay = self.base_delay * (2 ** (attempt - 1))
        if self.jitter:
            delay = delay * (0.5 + random.random())  # noqa: S311
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return float(max(0.0, delay))

    async def wait_before_retry(self, attempt: int) -> None:
        """Async sleep for the delay of the given attempt."""
        d = self.delay_for_attempt(attempt)
        if d > 0:
            await _sleep(d)

    def __repr__(self) -> str:
        limit = "unbounded" if self.max_attempts is None else self.max_attempts
        return (
            f"RetryPolicy({self.backoff}, max_attempts={limit}, "
            f"base_delay={self.base_delay}, max_delay={self.max_delay})"
        )


async def retry(
    policy: RetryPolicy,
    attempt: Callable[[], Awaitable[Outcome[T]]],
    should_retry: Callable[[Outcome[T]], bool],
) -> Outcome[T]:
    """Run ``attempt`` until it succeeds, ``should_retry`` declines or the
    policy is exhausted, sleeping between attempts. Returns the last Outcome.
    """
    index = 0
    while True:
        index += 1
        outcome = await attempt()
        if outcome.ok or not should_retry(outcome):
            return outcome
        if not policy.should_retry(index):
            return outcome
        await policy.wait_before_retry(index)


async def pause(seconds: float) -> None:
    """Sleep outside a retry schedule (e.g. an extra delay after an error)."""
    if seconds > 0:
        await _sleep(seconds)


async def _sleep(seconds: float) -> None:
    """Async sleep (overridable for tests)."""
    import asyncio

    await asyncio.sleep(seconds)


SQS_ENQUEUE_RETRY = RetryPolicy.exponential(0.1, max_attempts=5, max_delay=5.0)
BROKER_ENQUEUE_RETRY = RetryPolicy.exponential(0.05, max_attempts=5, max_delay=5.0)
RECONNECT_RETRY = RetryPolicy.constant(1.0)

"""Outcome — the result of one attempt: a value or a classified error."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a successful value or an error. Never both, never neither.

    Usage::

        outcome = Outcome.success(receipt)
        outcome = Outcome.failure(MessagingTimeoutError("send"))
    """

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    # ── Factory methods ──────────────────────────────────────────

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> Outcome[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def capture(fn: Callable[[], Awaitable[T]]) -> Outcome[T]:
    """Await ``fn()`` and fold any ``Exception`` into a failure Outcome.

    ``BaseException`` subclasses such as ``asyncio.CancelledError`` propagate.
    """
    try:
        return Outcome.success(await fn())
    except Exception as e:  # noqa: BLE001
        return Outcome.failure(e)

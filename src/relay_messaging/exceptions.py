"""Exception taxonomy for relay-messaging."""

from __future__ import annotations


class MessagingError(Exception):
    """Root exception for every messaging failure raised by this package."""


class MessagingConnectionError(MessagingError):
    """Raised when a session to the backend cannot be established or was lost."""


class MessagingTimeoutError(MessagingError, TimeoutError):
    """Raised when a blocking backend call exceeded its local timeout."""


class MessagingThrottlingError(MessagingError):
    """Raised when the backend signalled rate limiting."""


class MessagingSerializationError(MessagingError):
    """Raised when a payload cannot be encoded for the wire."""


class MessagingDecodeError(MessagingSerializationError):
    """Raised when a received payload does not parse as the expected type."""

    def __init__(self, message: str, body: bytes | None = None) -> None:
        self.body = body
        super().__init__(message)


class DestinationValidationError(MessagingError):
    """The backend rejected the destination (e.g. an invalid email domain).

    Callers should report this to the originator as a client error rather
    than as an infrastructure fault.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        self.code = code
        super().__init__(message)


class UnclassifiedMessagingError(MessagingError):
    """Any other backend failure. The original exception is kept in ``cause``."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)

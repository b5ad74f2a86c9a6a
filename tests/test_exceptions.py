"""Tests for the messaging exception taxonomy."""

from __future__ import annotations

from relay_messaging.exceptions import (
    DestinationValidationError,
    MessagingConnectionError,
    MessagingDecodeError,
    MessagingError,
    MessagingSerializationError,
    MessagingThrottlingError,
    MessagingTimeoutError,
    UnclassifiedMessagingError,
)


def test_all_errors_share_one_root() -> None:
    for cls in (
        DestinationValidationError,
        MessagingConnectionError,
        MessagingDecodeError,
        MessagingSerializationError,
        MessagingThrottlingError,
        MessagingTimeoutError,
        UnclassifiedMessagingError,
    ):
        assert issubclass(cls, MessagingError)


def test_timeout_is_builtin_timeout() -> None:
    assert issubclass(MessagingTimeoutError, TimeoutError)


def test_decode_error_is_serialization_error_and_keeps_body() -> None:
    e = MessagingDecodeError("bad payload", body=b"{")
    assert isinstance(e, MessagingSerializationError)
    assert e.body == b"{"
    assert "bad payload" in str(e)


def test_destination_validation_error_has_code() -> None:
    e = DestinationValidationError("rejected", code="InvalidParameterValue")
    assert e.code == "InvalidParameterValue"


def test_unclassified_error_wraps_cause() -> None:
    cause = RuntimeError("boom")
    e = UnclassifiedMessagingError("boom", cause=cause)
    assert e.cause is cause

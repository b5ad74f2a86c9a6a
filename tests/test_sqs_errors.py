"""Tests for classify_aws_error."""

from __future__ import annotations

import asyncio

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)

from relay_messaging.exceptions import (
    DestinationValidationError,
    MessagingConnectionError,
    MessagingThrottlingError,
    MessagingTimeoutError,
    UnclassifiedMessagingError,
)
from relay_messaging.sqs.errors import classify_aws_error


def _client_error(code: str, status: int = 400, message: str = "") -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        "SendMessage",
    )


def test_read_timeout_is_timeout() -> None:
    err = classify_aws_error(ReadTimeoutError(endpoint_url="https://sqs"))
    assert isinstance(err, MessagingTimeoutError)


def test_asyncio_timeout_is_timeout() -> None:
    assert isinstance(classify_aws_error(asyncio.TimeoutError()), MessagingTimeoutError)


def test_throttling_codes() -> None:
    for code in ("RequestThrottled", "ThrottlingException"):
        assert isinstance(classify_aws_error(_client_error(code)), MessagingThrottlingError)


def test_connection_failures() -> None:
    assert isinstance(
        classify_aws_error(EndpointConnectionError(endpoint_url="https://sqs")),
        MessagingConnectionError,
    )
    assert isinstance(classify_aws_error(NoCredentialsError()), MessagingConnectionError)


def test_connect_timeout_is_connection_failure() -> None:
    err = classify_aws_error(ConnectTimeoutError(endpoint_url="https://sqs"))
    assert isinstance(err, MessagingConnectionError)
    assert not isinstance(err, MessagingTimeoutError)


def test_invalid_domain_is_destination_validation_error() -> None:
    err = classify_aws_error(
        _client_error("InvalidParameterValue", 400, "Invalid domain name: <b.c>")
    )
    assert isinstance(err, DestinationValidationError)
    assert err.code == "InvalidParameterValue"


def test_invalid_domain_needs_status_400() -> None:
    err = classify_aws_error(
        _client_error("InvalidParameterValue", 500, "Invalid domain name: <b.c>")
    )
    assert isinstance(err, UnclassifiedMessagingError)


def test_other_errors_are_unclassified_and_keep_cause() -> None:
    original = _client_error("InternalError", 500)
    err = classify_aws_error(original)
    assert isinstance(err, UnclassifiedMessagingError)
    assert err.cause is original


def test_classified_errors_pass_through() -> None:
    err = MessagingTimeoutError("already")
    assert classify_aws_error(err) is err

"""JsonCodec — typed JSON encode/decode between payloads and wire bytes."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from .exceptions import MessagingDecodeError, MessagingSerializationError

T = TypeVar("T")


class JsonCodec(Generic[T]):
    """Encode payloads to compact UTF-8 JSON and decode them back as ``T``.

    ``payload_type`` may be any type pydantic understands: ``Any`` and plain
    JSON containers, dataclasses, TypedDicts or BaseModel subclasses. There
    is no envelope around the payload; what the application sends is what
    goes on the wire.
    """

    def __init__(self, payload_type: Any = Any) -> None:
        self._payload_type = payload_type
        self._adapter: TypeAdapter[T] = TypeAdapter(payload_type)

    @property
    def payload_type(self) -> Any:
        return self._payload_type

    def encode(self, payload: T) -> bytes:
        """Encode payload to JSON bytes."""
        try:
            return self._adapter.dump_json(payload)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise MessagingSerializationError(str(e)) from e

    def decode(self, raw: bytes | str) -> T:
        """Decode JSON bytes to ``T``; failures raise MessagingDecodeError."""
        try:
            return self._adapter.validate_json(raw)
        except (PydanticValidationError, UnicodeDecodeError, ValueError) as e:
            body = raw.encode("utf-8", "replace") if isinstance(raw, str) else raw
            raise MessagingDecodeError(
                f"payload is not a valid {_type_name(self._payload_type)}: {e}",
                body=body,
            ) from e


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or str(tp)

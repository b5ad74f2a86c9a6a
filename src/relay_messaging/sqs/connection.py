"""SQS client management and queue URL resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from aiobotocore.session import AioSession

from ..envelope import QueueHandle
from ..exceptions import MessagingConnectionError
from .errors import NONEXISTENT_QUEUE_CODES, error_code

if TYPE_CHECKING:
    from ..config import SQSOptions


class SQSConnectionManager:
    """Manages one shared aiobotocore SQS client and queue URL resolution.

    The client is stateless per call and safe to use from many tasks at once.
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        *,
        session: AioSession | None = None,
        **client_kwargs: Any,
    ) -> None:
        """Configure region and optional session/client kwargs."""
        self._region = region_name
        self._session = session or AioSession()
        self._client_kwargs = client_kwargs
        self._client: Any = None
        self._client_cm: Any = None

    @classmethod
    def from_options(
        cls, options: SQSOptions, *, session: AioSession | None = None
    ) -> SQSConnectionManager:
        kwargs: dict[str, Any] = {}
        if options.endpoint is not None:
            kwargs["endpoint_url"] = options.endpoint.url
        return cls(options.region_name, session=session, **kwargs)

    async def get_client(self) -> Any:
        """Return shared SQS client; create if needed."""
        if self._client is None:
            try:
                self._client_cm = self._session.create_client(
                    "sqs",
                    region_name=self._region,
                    **self._client_kwargs,
                )
                self._client = await self._client_cm.__aenter__()
            except Exception as e:
                self._client_cm = None
                raise MessagingConnectionError(str(e)) from e
        return self._client

    async def get_queue_url(self, queue_name: str) -> str:
        """Resolve queue name to queue URL. Queues are never created here."""
        client = await self.get_client()
        try:
            out = await client.get_queue_url(QueueName=queue_name)
            return str(out["QueueUrl"])
        except Exception as e:
            if error_code(e) in NONEXISTENT_QUEUE_CODES:
                raise MessagingConnectionError(
                    f"SQS queue {queue_name!r} does not exist"
                ) from e
            raise MessagingConnectionError(str(e)) from e

    async def queue_handle(self, queue_name: str) -> QueueHandle:
        """Resolve queue name to a QueueHandle (done once at startup)."""
        return QueueHandle(name=queue_name, path=await self.get_queue_url(queue_name))

    async def close(self) -> None:
        """Close the client if open."""
        if self._client_cm is not None:
            await self._client_cm.__aexit__(None, None, None)
            self._client_cm = None
            self._client = None

    async def health_check(self) -> bool:
        """Return True if we can list queues (lightweight check)."""
        try:
            client = await self.get_client()
            await client.list_queues(MaxResults=1)
            return True
        except Exception:  # noqa: BLE001
            return False

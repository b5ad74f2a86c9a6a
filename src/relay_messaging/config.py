"""Connection and retry options consumed by the adapters.

The host application loads these (YAML, environment, ...) and hands them
in; nothing here reads configuration on its own.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .envelope import QueueHandle


class Credentials(BaseModel):
    """Username and password for the broker."""

    model_config = ConfigDict(frozen=True)

    user: str
    password: SecretStr


class BrokerOptions(BaseModel):
    """Streaming broker location, credentials and the internal queue path."""

    model_config = ConfigDict(frozen=True)

    host: str = "localhost"
    port: int = Field(default=5672, gt=0, lt=65536)
    tls: bool = False
    credentials: Credentials | None = None
    virtualhost: str = "/"
    internal_queue: str = Field(..., description="Queue path on the broker side")
    connect_timeout: float = Field(default=5.0, gt=0)

    def internal_queue_handle(self) -> QueueHandle:
        return QueueHandle(name="InternalEventQueue", path=self.internal_queue)


class AWSEndpoint(BaseModel):
    """Explicit endpoint for an AWS service (e.g. a local emulator)."""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(default=443, gt=0, lt=65536)
    secure: bool = True

    @property
    def url(self) -> str:
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.host}:{self.port}"


class SQSOptions(BaseModel):
    """Region, optional endpoint override and queue names for SQS."""

    model_config = ConfigDict(frozen=True)

    region_name: str = "us-east-1"
    endpoint: AWSEndpoint | None = None
    internal_queue: str
    email_queue: str | None = None


class RetryOverrides(BaseModel):
    """Replace the default enqueue attempt limit and base backoff."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int | None = Field(default=None, ge=1)
    base_delay: float | None = Field(default=None, ge=0)

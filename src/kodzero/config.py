"""Configuration for the Kodzero SDK.

Uses Pydantic v2 for validation with sensible defaults.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

from .errors import InvalidConfigError


class TelemetryConfig(BaseModel):
    """OpenTelemetry and structlog configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "kodzero-sdk"
    log_level: str = "INFO"


class SessionConfig(BaseModel):
    """Lifecycle callbacks for automatic session refresh.

    Both callbacks may be plain functions or coroutine functions. Each fires
    once per refresh attempt, however many requests were waiting on it.
    """

    model_config = ConfigDict(frozen=True)

    on_refresh: Callable[[], Any] | None = None
    on_refresh_failure: Callable[[Exception], Any] | None = None

    # Overrides the auth strategy's refresh endpoint path when set
    refresh_path: str | None = None


class KodzeroConfig(BaseModel):
    """Main configuration for the Kodzero SDK."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Required
    host: HttpUrl

    auth_collection: str = Field(default="auth/password", min_length=1)

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0
    user_agent: str = "kodzero-sdk/0.1.0 Python"

    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("auth_collection")
    @classmethod
    def strip_collection(cls, v: str) -> str:
        """Normalize the auth collection to have no surrounding slashes."""
        stripped = v.strip("/")
        if not stripped:
            msg = "auth_collection must not be empty"
            raise ValueError(msg)
        return stripped

    @property
    def host_str(self) -> str:
        """Get host as string without trailing slash."""
        return str(self.host).rstrip("/")

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "KODZERO_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        host = get_env("HOST")
        if not host:
            msg = f"{prefix}HOST environment variable is required"
            raise InvalidConfigError(msg, field="host")

        return cls(
            host=host,
            auth_collection=get_env("AUTH_COLLECTION", "auth/password"),
            timeout=float(get_env("TIMEOUT", "30.0")),
        )

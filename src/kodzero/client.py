"""Kodzero SDK client."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Self, TypeVar

import httpx

from .auth import KodzeroAuth
from .config import KodzeroConfig, SessionConfig
from .http import ApiClient, create_async_http_client
from .telemetry import configure_telemetry

T = TypeVar("T")


class Kodzero:
    """Entry point: an authenticated API client for one Kodzero host."""

    def __init__(
        self,
        config: KodzeroConfig,
        *,
        session: SessionConfig | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize client.

        Args:
            config: SDK configuration.
            session: Optional refresh callbacks.
            http: Optional pre-built transport, mainly for tests.
        """
        self.config = config
        configure_telemetry(config.telemetry)
        self.api = ApiClient(http or create_async_http_client(config))
        self.auth = KodzeroAuth(config, self.api, session)

    @property
    def host(self) -> str:
        return self.config.host_str

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.api.close()

    async def with_retry(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` and retry it once after refreshing on a 401."""
        return await self.auth.with_retry(operation)

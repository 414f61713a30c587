"""Base types shared by auth strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import httpx

from ..core.errors import ErrorFactory
from ..core.urls import build_url
from ..telemetry import get_logger

if TYPE_CHECKING:
    from ..config import KodzeroConfig
    from ..http import ApiClient
    from ..models import TokenPair


class AuthProvider(Protocol):
    """Anything able to exchange a refresh token for a new access token."""

    refresh_path: str

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange ``refresh_token`` for a new pair.

        Raises on failure. Must issue exactly one request.
        """
        ...


class AuthStrategy:
    """Common plumbing for auth strategies bound to one collection."""

    collection: str = ""

    def __init__(self, config: KodzeroConfig, api: ApiClient) -> None:
        self.config = config
        self.api = api
        self._logger = get_logger()

    def url(self, action: str) -> str:
        """Absolute URL of ``action`` within the strategy's collection."""
        return build_url(self.config.host_str, f"{self.collection}/{action}")

    @property
    def refresh_path(self) -> str:
        return f"{self.collection}/refresh"

    def _handle_api_error(self, response: httpx.Response) -> None:
        ErrorFactory.raise_for_response(response)

    async def _post_json(self, action: str, payload: dict[str, Any]) -> Any:
        response = await self.api.post(
            self.url(action),
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        self._handle_api_error(response)
        return response.json()

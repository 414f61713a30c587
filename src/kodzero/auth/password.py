"""Password (email) auth strategy."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from ..errors import KodzeroError, TokenRefreshError
from ..models import ApiResponse, RefreshResult, TokenPair
from ..telemetry import traced_auth
from .base import AuthStrategy

if TYPE_CHECKING:
    from ..config import KodzeroConfig
    from ..http import ApiClient


class PasswordAuth(AuthStrategy):
    """Auth strategy for the ``auth/password`` collection.

    Never writes tokens itself; the session guard applies whatever
    ``refresh`` returns.
    """

    def __init__(self, config: KodzeroConfig, api: ApiClient) -> None:
        super().__init__(config, api)
        self.collection = config.auth_collection

    @traced_auth("refresh")
    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new access token.

        Args:
            refresh_token: Current refresh token.

        Returns:
            New token pair; ``refresh`` is None unless the server rotated it.

        Raises:
            TokenRefreshError: If the server refused or returned no token.
        """
        if not refresh_token:
            raise TokenRefreshError("No refresh token available")

        body = await self._post_json("refresh", {"refresh": refresh_token})

        try:
            envelope = ApiResponse[RefreshResult].model_validate(body)
        except ValidationError as e:
            raise TokenRefreshError(f"Malformed refresh response: {e}") from e

        if not envelope.ok or envelope.result is None or envelope.result.tokens is None:
            raise TokenRefreshError("Refresh response carried no tokens")

        return envelope.result.tokens

    @traced_auth("logout")
    async def logout(self) -> bool:
        """Log out on the server. Returns the server's ``ok`` flag."""
        body = await self._post_json("logout", {})
        return bool(isinstance(body, dict) and body.get("ok"))

    async def verify(self) -> bool:
        """Check the current access token. Never raises."""
        try:
            response = await self.api.get(self.url("verify"))
            body = response.json()
        except (KodzeroError, ValueError) as e:
            self._logger.warning("Token verification error", error=str(e))
            return False

        return bool(isinstance(body, dict) and body.get("ok"))

"""Authentication facade for the Kodzero SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from ..session import SessionGuard, TokenStore
from .base import AuthProvider, AuthStrategy
from .password import PasswordAuth

if TYPE_CHECKING:
    from ..config import KodzeroConfig, SessionConfig
    from ..http import ApiClient
    from ..models import TokenPair

T = TypeVar("T")


class KodzeroAuth:
    """Token management and session recovery bound to one API client.

    The password strategy is the default; its ``refresh`` feeds the session
    guard, which is the only writer of the token store.
    """

    def __init__(
        self,
        config: KodzeroConfig,
        api: ApiClient,
        session: SessionConfig | None = None,
        *,
        store: TokenStore | None = None,
    ) -> None:
        self.password = PasswordAuth(config, api)
        self.session = SessionGuard(api, self.password, store, session)

    @property
    def tokens(self) -> TokenStore:
        return self.session.tokens

    def set_tokens(self, access: str, refresh: str | None = None) -> None:
        """Set tokens manually, e.g. on startup."""
        self.session.set_tokens(access, refresh)

    def clear_tokens(self) -> None:
        self.session.clear_tokens()

    async def refresh(self) -> TokenPair:
        """Refresh the access token now, sharing any refresh in flight."""
        return await self.session.refresh()

    async def logout(self) -> bool:
        """Log out and clear tokens when the server confirms."""
        ok = await self.password.logout()
        if ok:
            self.session.clear_tokens()
        return ok

    async def verify(self) -> bool:
        return await self.password.verify()

    async def with_retry(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await self.session.with_retry(operation)


__all__ = [
    "AuthProvider",
    "AuthStrategy",
    "KodzeroAuth",
    "PasswordAuth",
]

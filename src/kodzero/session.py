"""Session guard: keeps every API call authenticated.

The guard owns the access/refresh token pair, attaches the access token to
outgoing requests and recovers from ``401 Unauthorized`` by refreshing the
token once, however many requests failed at the same time, then replaying
the failed request outside the hook pipeline.
"""

from __future__ import annotations

import asyncio
import inspect
import json
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar
from urllib.parse import quote, urlencode

import httpx

from .config import SessionConfig
from .errors import KodzeroApiError, TokenRefreshError
from .models import CapturedRequest, TokenPair
from .telemetry import (
    ATTR_REFRESH_WAITERS,
    get_logger,
    record_replay,
    refresh_span,
    replay_span,
)

if TYPE_CHECKING:
    from .auth.base import AuthProvider
    from .http import ApiClient

T = TypeVar("T")

UNAUTHORIZED = 401
CAPTURE_EXTENSION = "kodzero.captured_request"
BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class TokenStore:
    """Latest known access/refresh pair. Empty string means absent."""

    def __init__(self, access: str = "", refresh: str = "") -> None:
        self.access = access
        self.refresh = refresh

    def has_access(self) -> bool:
        return bool(self.access)

    def has_refresh(self) -> bool:
        return bool(self.refresh)

    def set_access(self, token: str) -> None:
        self.access = token

    def set_refresh(self, token: str) -> None:
        self.refresh = token

    def clear(self) -> None:
        """Clear both access and refresh tokens."""
        self.access = ""
        self.refresh = ""

    def snapshot(self) -> tuple[str, str]:
        return self.access, self.refresh


class SessionGuard:
    """Attaches credentials, refreshes once, and replays unauthorized calls."""

    def __init__(
        self,
        api: ApiClient,
        provider: AuthProvider,
        store: TokenStore | None = None,
        config: SessionConfig | None = None,
    ) -> None:
        """Initialize the guard and register its hooks on ``api``.

        Args:
            api: Hooked API client whose calls the guard protects.
            provider: Auth strategy able to exchange a refresh token.
            store: Token store; a fresh empty one when omitted.
            config: Optional refresh callbacks and refresh path override.
        """
        self._api = api
        self._provider = provider
        self._store = store or TokenStore()
        self._config = config or SessionConfig()
        self._refresh_path = self._config.refresh_path or provider.refresh_path
        self._refresh_task: asyncio.Task[TokenPair] | None = None
        self._refresh_attempts = 0
        self._refresh_waiters = 0
        self._logger = get_logger()

        # Most recent outgoing request; fallback when a response carries none
        self.last_request: CapturedRequest | None = None

        api.use_request_hook(self.on_request)
        api.use_response_hook(self.on_response)

    @property
    def tokens(self) -> TokenStore:
        return self._store

    @property
    def refresh_pending(self) -> bool:
        """True while a refresh is in flight."""
        return self._refresh_task is not None

    def set_tokens(self, access: str, refresh: str | None = None) -> None:
        """Set tokens, e.g. restored from storage on startup.

        The refresh token is only replaced when one is given.
        """
        self._store.set_access(access)
        if refresh:
            self._store.set_refresh(refresh)

    def clear_tokens(self) -> None:
        self._store.clear()

    def on_request(self, request: httpx.Request) -> httpx.Request:
        """Attach the bearer token and capture the request for replay."""
        if self._store.has_access():
            request.headers["Authorization"] = f"Bearer {self._store.access}"

        captured = CapturedRequest.from_request(request)
        self.last_request = captured
        request.extensions[CAPTURE_EXTENSION] = captured
        return request

    async def on_response(self, response: httpx.Response) -> httpx.Response:
        """Refresh and replay an unauthorized response when possible."""
        if response.status_code != UNAUTHORIZED:
            return response

        if not self._store.has_refresh():
            return response

        if self._is_refresh_call(response):
            return response

        # A 401 seen by the refresh task itself must not wait on that task
        if self._refresh_task is not None and asyncio.current_task() is self._refresh_task:
            return response

        # Taken before refreshing: the refresh call overwrites last_request
        captured = self._captured_for(response)

        try:
            tokens = await self.refresh()
        except TokenRefreshError:
            return response

        if captured is None:
            return response

        return await self._replay(captured, tokens.access, response)

    async def refresh(self) -> TokenPair:
        """Refresh the access token, joining an in-flight refresh if any.

        Raises:
            TokenRefreshError: If the provider could not refresh.
        """
        if self._refresh_task is None:
            self._refresh_attempts += 1
            self._refresh_waiters = 0
            self._refresh_task = asyncio.ensure_future(
                self._run_refresh(self._refresh_attempts)
            )
        self._refresh_waiters += 1
        return await asyncio.shield(self._refresh_task)

    async def with_retry(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation``, retrying it once after an unauthorized error.

        Used where the hook pipeline does not apply. Only a
        ``KodzeroApiError`` with status 401 triggers a retry, and only while a
        refresh token is held. A failed refresh re-raises the original error.
        """
        try:
            return await operation()
        except KodzeroApiError as e:
            if not e.is_unauthorized or not self._store.has_refresh():
                raise

            try:
                await self.refresh()
            except TokenRefreshError:
                raise e from None

            self._logger.debug("Retrying operation after refresh")
            return await operation()

    async def _run_refresh(self, attempt: int) -> TokenPair:
        logger = get_logger(refresh_attempt=attempt)
        try:
            with refresh_span(attempt) as span:
                logger.info("Refreshing access token")
                try:
                    tokens = await self._provider.refresh(self._store.refresh)
                except TokenRefreshError as e:
                    await self._refresh_failed(logger, e)
                    raise
                except Exception as e:
                    error = TokenRefreshError(
                        str(e), status_code=getattr(e, "status_code", None)
                    )
                    await self._refresh_failed(logger, error)
                    raise error from e
                finally:
                    span.set_attribute(ATTR_REFRESH_WAITERS, self._refresh_waiters)

                self._store.set_access(tokens.access)
                if tokens.refresh:
                    self._store.set_refresh(tokens.refresh)

                logger.info(
                    "Access token refreshed",
                    waiters=self._refresh_waiters,
                    rotated=bool(tokens.refresh),
                )
                await _invoke(logger, "on_refresh", self._config.on_refresh)
                return tokens
        finally:
            self._refresh_task = None

    async def _refresh_failed(self, logger: Any, error: TokenRefreshError) -> None:
        logger.warning(
            "Token refresh failed",
            error=error.message,
            waiters=self._refresh_waiters,
        )
        await _invoke(logger, "on_refresh_failure", self._config.on_refresh_failure, error)

    async def _replay(
        self,
        captured: CapturedRequest,
        access: str,
        original: httpx.Response,
    ) -> httpx.Response:
        headers = {
            key: value
            for key, value in captured.headers.items()
            if key.lower() not in ("authorization", "content-length")
        }
        headers["Authorization"] = f"Bearer {access}"

        url = captured.url
        if captured.params:
            url = f"{url}?{urlencode(captured.params, quote_via=quote)}"

        content = None
        if captured.method.upper() in BODY_METHODS and captured.body is not None:
            content = _serialize_body(captured.body)

        self.last_request = captured.model_copy(
            update={"headers": dict(headers), "body": content}
        )

        with replay_span(captured.method, url) as span:
            try:
                response = await self._api.send_raw(
                    captured.method, url, headers=headers, content=content
                )
            except httpx.HTTPError as e:
                record_replay(span, "transport_error")
                self._logger.warning(
                    "Replay failed, returning original response",
                    method=captured.method,
                    url=url,
                    error=str(e),
                )
                return original
            record_replay(span, "replayed", response.status_code)

        self._logger.debug(
            "Replayed request",
            method=captured.method,
            url=url,
            status=response.status_code,
        )
        return response

    def _is_refresh_call(self, response: httpx.Response) -> bool:
        return self._refresh_path in response.request.url.path

    def _captured_for(self, response: httpx.Response) -> CapturedRequest | None:
        captured = response.request.extensions.get(CAPTURE_EXTENSION)
        if isinstance(captured, CapturedRequest):
            return captured
        return self.last_request


def _serialize_body(body: Any) -> bytes | str:
    if isinstance(body, (bytes, str)):
        return body
    return json.dumps(body)


async def _invoke(
    logger: Any,
    name: str,
    callback: Callable[..., Any] | None,
    *args: Any,
) -> None:
    """Run a user callback; its errors are logged, never raised to callers."""
    if callback is None:
        return
    try:
        result = callback(*args)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.exception("Session callback raised", callback=name)

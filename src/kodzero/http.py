"""HTTP client for the Kodzero SDK.

Wraps ``httpx.AsyncClient`` with ordered request and response hooks.
Response hooks may replace the response they receive, which is how the
session guard substitutes a replayed response for an unauthorized one.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Self

import httpx

from .core.errors import ErrorFactory
from .telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from .config import KodzeroConfig

RequestHook = Callable[[httpx.Request], httpx.Request | None]
ResponseHook = Callable[[httpx.Response], httpx.Response | Awaitable[httpx.Response]]


def create_async_http_client(config: KodzeroConfig) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    Args:
        config: SDK configuration.

    Returns:
        Configured httpx.AsyncClient.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=config.connect_timeout,
            read=config.timeout,
            write=config.timeout,
            pool=config.timeout,
        ),
        headers={
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        },
        follow_redirects=False,
    )


class ApiClient:
    """Async HTTP client with request/response middleware."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        """Initialize API client.

        Args:
            http: Underlying transport. Hooks never run for calls made on it
                directly, see ``send_raw``.
        """
        self._http = http
        self._request_hooks: list[RequestHook] = []
        self._response_hooks: list[ResponseHook] = []
        self._logger = get_logger()

    @classmethod
    def from_config(cls, config: KodzeroConfig) -> Self:
        """Create an API client with a transport built from config."""
        return cls(create_async_http_client(config))

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http.aclose()

    def use_request_hook(self, hook: RequestHook) -> None:
        """Register a hook run on every outgoing request, in order."""
        self._request_hooks.append(hook)

    def use_response_hook(self, hook: ResponseHook) -> None:
        """Register a hook run on every response, in order.

        The hook's return value replaces the response for the remaining
        hooks and for the caller.
        """
        self._response_hooks.append(hook)

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | str | None = None,
    ) -> httpx.Response:
        """Send a request through the hook pipeline.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            json: Optional JSON body.
            params: Optional query parameters.
            headers: Optional extra headers.
            content: Optional raw body.

        Returns:
            The response produced by the last response hook.

        Raises:
            NetworkError: On transport failure.
            TimeoutError: When the transport times out.
        """
        request = self._http.build_request(
            method,
            url,
            json=json,
            params=params,
            headers=headers,
            content=content,
        )
        for request_hook in self._request_hooks:
            request = request_hook(request) or request

        with trace_operation(
            "http_request",
            attributes={"http.method": request.method, "http.url": str(request.url)},
        ):
            try:
                response = await self._http.send(request)
            except httpx.HTTPError as e:
                self._logger.warning(
                    "Request failed",
                    method=request.method,
                    url=str(request.url),
                    error=str(e),
                )
                raise ErrorFactory.from_exception(e) from e

        for response_hook in self._response_hooks:
            result = response_hook(response)
            if inspect.isawaitable(result):
                result = await result
            response = result

        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def send_raw(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        content: bytes | str | None = None,
    ) -> httpx.Response:
        """Send a request directly on the transport, skipping every hook.

        Transport failures surface as ``httpx.HTTPError``.
        """
        return await self._http.request(method, url, headers=headers, content=content)

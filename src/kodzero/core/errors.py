"""Centralized error factory for the Kodzero SDK.

Turns HTTP responses and transport exceptions into SDK errors so every
component reports failures the same way.
"""

from __future__ import annotations

import uuid
from typing import Any

import httpx

from ..errors import (
    KodzeroApiError,
    KodzeroError,
    NetworkError,
    TimeoutError,
)


class ErrorFactory:
    """Centralized error creation with consistent structure."""

    @staticmethod
    def generate_correlation_id() -> str:
        """Generate a unique correlation ID."""
        return str(uuid.uuid4())

    @staticmethod
    def from_http_response(
        response: httpx.Response,
        *,
        correlation_id: str | None = None,
    ) -> KodzeroApiError:
        """Create an API error from a non-2xx response.

        The backend reports failures as ``{"ok": false, "details": ...}`` or
        ``{"error": ...}``; the reason phrase is used when the body carries
        neither.

        Args:
            response: HTTP response object.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            KodzeroApiError describing the failure.
        """
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        body: Any = None
        try:
            body = response.json()
        except ValueError:
            body = None

        reason: str | None = None
        if isinstance(body, dict):
            reason = body.get("details") or body.get("error")
        reason = str(reason) if reason else response.reason_phrase

        try:
            url = str(response.request.url)
        except RuntimeError:
            url = ""

        return KodzeroApiError(
            url,
            response.status_code,
            f"API Request failed with status {response.status_code}. Details: {reason}",
            reason,
            correlation_id=correlation_id,
        )

    @staticmethod
    def raise_for_response(response: httpx.Response) -> None:
        """Raise KodzeroApiError unless the response is successful."""
        if response.is_success:
            return
        raise ErrorFactory.from_http_response(response)

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        correlation_id: str | None = None,
    ) -> KodzeroError:
        """Create SDK error from exception.

        Args:
            exc: Original exception.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            Appropriate KodzeroError subclass.
        """
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        if isinstance(exc, KodzeroError):
            if exc.correlation_id is None:
                exc.correlation_id = correlation_id
            return exc

        if isinstance(exc, httpx.TimeoutException):
            return TimeoutError(
                f"Request timed out: {exc}",
                correlation_id=correlation_id,
            )

        if isinstance(exc, httpx.ConnectError):
            return NetworkError(
                f"Connection failed: {exc}",
                correlation_id=correlation_id,
                cause=exc,
            )

        if isinstance(exc, httpx.HTTPError):
            return NetworkError(
                f"HTTP error: {exc}",
                correlation_id=correlation_id,
                cause=exc,
            )

        return NetworkError(
            f"Unexpected error: {exc}",
            correlation_id=correlation_id,
            cause=exc,
        )

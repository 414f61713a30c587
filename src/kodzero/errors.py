"""Error classes for the Kodzero SDK.

Structured error hierarchy with error codes and correlation IDs so that
failures can be logged and serialized consistently.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the Kodzero SDK."""

    # Authentication errors (1xxx)
    UNAUTHORIZED = "AUTH_1001"
    TOKEN_REFRESH_FAILED = "AUTH_1002"

    # API errors (2xxx)
    API_ERROR = "API_2001"
    INVALID_CONFIG = "API_2002"

    # Network errors (3xxx)
    NETWORK_ERROR = "NET_3001"
    TIMEOUT_ERROR = "NET_3002"


class KodzeroError(Exception):
    """Base error for the Kodzero SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.status_code = status_code
        self.correlation_id = correlation_id
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class KodzeroApiError(KodzeroError):
    """API request answered with a non-2xx status."""

    def __init__(
        self,
        url: str,
        status_code: int,
        message: str,
        details: str | None = None,
        *,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED if status_code == 401 else ErrorCode.API_ERROR,
            status_code=status_code,
            correlation_id=correlation_id,
            details={"url": url, "details": details or ""},
        )
        self.url = url
        self.reason = details or ""

    @property
    def is_unauthorized(self) -> bool:
        """True when the API rejected the credential."""
        return self.status_code == 401


class TokenRefreshError(KodzeroError):
    """Failed to refresh the access token."""

    def __init__(
        self,
        message: str = "Failed to refresh token",
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TOKEN_REFRESH_FAILED,
            status_code=status_code,
            correlation_id=correlation_id,
        )


class NetworkError(KodzeroError):
    """Network request failed."""

    def __init__(
        self,
        message: str = "Network request failed",
        *,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.NETWORK_ERROR,
            correlation_id=correlation_id,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class TimeoutError(KodzeroError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        correlation_id: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TIMEOUT_ERROR,
            status_code=408,
            correlation_id=correlation_id,
            details={"timeout_seconds": timeout_seconds} if timeout_seconds else None,
        )


class InvalidConfigError(KodzeroError):
    """Invalid SDK configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )

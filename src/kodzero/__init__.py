"""Kodzero Python SDK."""

from .auth import KodzeroAuth, PasswordAuth
from .client import Kodzero
from .config import KodzeroConfig, SessionConfig, TelemetryConfig
from .errors import (
    InvalidConfigError,
    KodzeroApiError,
    KodzeroError,
    NetworkError,
    TimeoutError,
    TokenRefreshError,
)
from .http import ApiClient
from .models import CapturedRequest, TokenPair
from .session import SessionGuard, TokenStore

__all__ = [
    "Kodzero",
    "KodzeroAuth",
    "PasswordAuth",
    "KodzeroConfig",
    "SessionConfig",
    "TelemetryConfig",
    "KodzeroError",
    "KodzeroApiError",
    "TokenRefreshError",
    "NetworkError",
    "TimeoutError",
    "InvalidConfigError",
    "ApiClient",
    "CapturedRequest",
    "TokenPair",
    "SessionGuard",
    "TokenStore",
]

__version__ = "0.1.0"

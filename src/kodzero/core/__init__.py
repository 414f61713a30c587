"""Core helpers shared by the client, the auth strategies and the guard."""

from __future__ import annotations

from .errors import ErrorFactory
from .urls import build_url

__all__ = [
    "ErrorFactory",
    "build_url",
]

"""Pydantic models for the Kodzero SDK.

Frozen models for token data, API envelopes and captured requests.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

ResultT = TypeVar("ResultT")


class TokenPair(BaseModel):
    """Access/refresh credential pair as issued by the backend."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access: str = Field(..., min_length=1)
    refresh: str | None = None


class ApiResponse(BaseModel, Generic[ResultT]):
    """Standard ``{"ok": ..., "result": ...}`` envelope."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    ok: bool
    result: ResultT | None = None


class RefreshResult(BaseModel):
    """Result payload of the refresh endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    tokens: TokenPair | None = None


class CapturedRequest(BaseModel):
    """Snapshot of an outgoing request, detached from the live request.

    Headers and query params are copies; mutating the original request after
    capture does not affect the snapshot.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    params: list[tuple[str, str]] = Field(default_factory=list)

    @classmethod
    def from_request(cls, request: httpx.Request) -> CapturedRequest:
        """Capture method, query-less URL, headers, body and params."""
        try:
            body: bytes | None = request.content or None
        except httpx.RequestNotRead:
            # Streaming bodies cannot be replayed
            body = None

        return cls(
            method=request.method,
            url=str(request.url).split("?", 1)[0],
            headers=dict(request.headers.items()),
            body=body,
            params=list(request.url.params.multi_items()),
        )

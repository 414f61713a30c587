"""URL helpers shared by auth strategies."""

from __future__ import annotations

import re

_SLASHES = re.compile(r"/+")


def build_url(base_url: str, collection: str, item_id: str | None = None) -> str:
    """Join host, collection and optional id into a single URL.

    Duplicate slashes are collapsed while the scheme separator is kept, so
    ``build_url("https://example.com/", "/collection/", "123")`` gives
    ``https://example.com/collection/123``.
    """
    url = f"{base_url}/{collection}"
    if item_id:
        url += f"/{item_id}"

    return _SLASHES.sub("/", url).replace(":/", "://", 1)

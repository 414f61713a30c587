"""Unit tests for URL building."""

from hypothesis import given, settings, strategies as st

from kodzero.core.urls import build_url

segment = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-_", min_size=1, max_size=10)
slashes = st.text(alphabet="/", max_size=3)


class TestBuildUrl:
    """Tests for build_url."""

    def test_collection_only(self) -> None:
        assert build_url("https://example.com", "posts") == "https://example.com/posts"

    def test_with_item_id(self) -> None:
        assert build_url("https://example.com", "posts", "123") == "https://example.com/posts/123"

    def test_collapses_duplicate_slashes(self) -> None:
        url = build_url("https://example.com/", "/collection/", "123")

        assert url == "https://example.com/collection/123"

    def test_nested_collection(self) -> None:
        url = build_url("https://example.com", "auth/password", "refresh")

        assert url == "https://example.com/auth/password/refresh"

    def test_keeps_port_and_plain_http(self) -> None:
        assert build_url("http://localhost:6969/", "posts") == "http://localhost:6969/posts"

    def test_empty_id_is_ignored(self) -> None:
        assert build_url("https://example.com", "posts", "") == "https://example.com/posts"

    @given(
        collection=st.lists(segment, min_size=1, max_size=3),
        item_id=st.one_of(st.none(), segment),
        pad=slashes,
    )
    @settings(max_examples=100)
    def test_never_doubles_slashes(
        self,
        collection: list[str],
        item_id: str | None,
        pad: str,
    ) -> None:
        url = build_url(
            "https://example.com" + pad,
            pad + (pad or "/").join(collection),
            item_id,
        )

        scheme, rest = url.split("://", 1)
        assert scheme == "https"
        assert "//" not in rest
        assert not rest.endswith("/")
        expected = ["example.com", *collection] + ([item_id] if item_id else [])
        assert rest.split("/") == expected

"""Tests for URL helpers used by the content extractor."""

from __future__ import annotations

from linkdigest.core.url_utils import build_variant_url, describe_url, is_http_url, url_hash_md5


class TestBuildVariantUrl:
    def test_query_variant_without_existing_query(self) -> None:
        assert build_variant_url("https://example.com/post", "?reader=true") == (
            "https://example.com/post?reader=true"
        )

    def test_query_variant_appends_to_existing_query(self) -> None:
        assert build_variant_url("https://example.com/post?id=7", "?amp=1") == (
            "https://example.com/post?id=7&amp=1"
        )

    def test_path_variant_inserted_after_origin(self) -> None:
        assert build_variant_url("https://example.com/blog/post?id=7", "/amp") == (
            "https://example.com/amp/blog/post?id=7"
        )

    def test_unknown_variant_shape(self) -> None:
        assert build_variant_url("https://example.com/", "amp") is None


class TestDescribeUrl:
    def test_path_words_become_title(self) -> None:
        title, text = describe_url("https://www.example.com/blog/my-first_post")
        assert title == "blog my first post"
        assert text == "Content from example.com: blog my first post"

    def test_domain_only(self) -> None:
        title, text = describe_url("https://example.org/")
        assert title == "example.org"
        assert text == "Content from example.org"

    def test_unparseable_url(self) -> None:
        title, text = describe_url("not a url")
        assert title == "Unknown Website"
        assert text == "Website: not a url"

    def test_never_empty(self) -> None:
        for url in ("", "ftp://files.example.com/a", "https://x.io/a-b"):
            title, text = describe_url(url)
            assert title
            assert text


def test_is_http_url() -> None:
    assert is_http_url("https://example.com")
    assert is_http_url("http://example.com/a?b=c")
    assert not is_http_url("ftp://example.com")
    assert not is_http_url("example.com")
    assert not is_http_url("")


def test_url_hash_is_stable() -> None:
    first = url_hash_md5("https://example.com/a")
    assert first == url_hash_md5("https://example.com/a")
    assert first != url_hash_md5("https://example.com/b")
    assert len(first) == 32

"""Tests for URL helpers."""

import pytest

from defaultanswer.extraction.url import (
    brand_from_domain,
    extract_domain,
    is_valid_url,
    normalize_url,
    url_path,
)


class TestNormalizeUrl:
    """Tests for normalize_url."""

    def test_adds_https(self) -> None:
        assert normalize_url("  acme.com ") == "https://acme.com"

    def test_keeps_scheme(self) -> None:
        assert normalize_url("http://acme.com/x") == "http://acme.com/x"

    def test_empty(self) -> None:
        assert normalize_url("   ") == ""


class TestIsValidUrl:
    """Tests for lenient URL validation."""

    @pytest.mark.parametrize("raw", ["acme.com", "https://acme.com/pricing", "a.b"])
    def test_valid(self, raw: str) -> None:
        assert is_valid_url(raw) is True

    @pytest.mark.parametrize("raw", ["", "localhost", "acme .com", "not a url"])
    def test_invalid(self, raw: str) -> None:
        assert is_valid_url(raw) is False


class TestDomainHelpers:
    """Tests for domain and brand helpers."""

    def test_strips_www(self) -> None:
        assert extract_domain("https://www.acme.com/about") == "acme.com"

    def test_schemeless(self) -> None:
        assert extract_domain("www.acme.com/about") == "acme.com"

    def test_brand_from_domain(self) -> None:
        assert brand_from_domain("acme.com") == "Acme"
        assert brand_from_domain("") == ""

    def test_url_path(self) -> None:
        assert url_path("https://acme.com/pricing") == "/pricing"
        assert url_path("https://acme.com") == "/"

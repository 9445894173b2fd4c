"""Tests for inbound request validation."""
import pytest

import normalize
from errors import InvalidEncoding, InvalidUrlFormat, MethodNotAllowed, MissingParameter
from normalize import check_method, decode_target, relay_base_url


class TestCheckMethod:
    @pytest.mark.parametrize("method", ["GET", "OPTIONS", "get"])
    def test_allowed(self, method):
        check_method(method)

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH", "HEAD"])
    def test_rejected(self, method):
        with pytest.raises(MethodNotAllowed):
            check_method(method)


class TestDecodeTarget:
    def test_plain_url_unchanged(self):
        assert decode_target("https://host/a.m3u8") == "https://host/a.m3u8"

    def test_percent_encoded_url(self):
        assert decode_target("https%3A%2F%2Fhost%2Fa%20b.m3u8") == "https://host/a b.m3u8"

    def test_truncated_escape(self):
        with pytest.raises(InvalidEncoding):
            decode_target("https://host/%E")

    def test_non_hex_escape(self):
        with pytest.raises(InvalidEncoding):
            decode_target("https://host/%zz")

    def test_invalid_utf8(self):
        with pytest.raises(InvalidEncoding):
            decode_target("https://host/%FF%FE")


class TestNormalize:
    def test_missing_url(self):
        with pytest.raises(MissingParameter):
            normalize.normalize({}, "http://relay/api/proxy")

    def test_empty_url(self):
        with pytest.raises(MissingParameter):
            normalize.normalize({"url": ""}, "http://relay/api/proxy")

    @pytest.mark.parametrize("url", ["ftp://host/a", "//host/a", "host/a.m3u8", "javascript:alert(1)"])
    def test_non_http_scheme(self, url):
        with pytest.raises(InvalidUrlFormat):
            normalize.normalize({"url": url}, "http://relay/api/proxy")

    def test_default_referer(self, monkeypatch):
        monkeypatch.setattr(normalize.settings, "DEFAULT_REFERER", "https://megacloud.tv")
        preq = normalize.normalize({"url": "https://host/a.m3u8"}, "http://relay/api/proxy")
        assert preq.target_url == "https://host/a.m3u8"
        assert preq.referer == "https://megacloud.tv"
        assert preq.relay_base == "http://relay/api/proxy"

    def test_explicit_referer(self):
        preq = normalize.normalize(
            {"url": "https%3A%2F%2Fhost%2Fa.m3u8", "referer": "https://site.example/"},
            "http://relay/api/proxy",
        )
        assert preq.target_url == "https://host/a.m3u8"
        assert preq.referer == "https://site.example/"


class TestRelayBaseUrl:
    def test_from_request(self, monkeypatch):
        monkeypatch.setattr(normalize.settings, "RELAY_BASE_URL", "")
        assert relay_base_url({}, "http", "relay.local:8080", "/api/proxy") == "http://relay.local:8080/api/proxy"

    def test_forwarded_proto(self, monkeypatch):
        monkeypatch.setattr(normalize.settings, "RELAY_BASE_URL", "")
        headers = {"X-Forwarded-Proto": "https, http"}
        assert relay_base_url(headers, "http", "relay.example", "/proxy") == "https://relay.example/proxy"

    def test_configured_base_wins(self, monkeypatch):
        monkeypatch.setattr(normalize.settings, "RELAY_BASE_URL", "https://cdn.example/api/proxy")
        headers = {"X-Forwarded-Proto": "http"}
        assert relay_base_url(headers, "http", "internal:8080", "/proxy") == "https://cdn.example/api/proxy"

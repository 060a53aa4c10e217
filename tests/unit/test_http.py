from __future__ import annotations

import pytest
import requests

from locationsharing.common.cookies import Cookie
from locationsharing.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text


def test_http_get_text_success(monkeypatch):
    client = HttpClient()
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, ")]}'\n[]")

    monkeypatch.setattr(client.session, "request", fake_request)
    body = client.get_text("https://example.com/read", params={"hl": "en"})

    assert body == ")]}'\n[]"
    assert seen["params"] == {"hl": "en"}
    assert seen["timeout"] == (10.0, 30.0)


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient()
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503))

    with pytest.raises(RetryableHttpError):
        client.get_text("https://example.com")


def test_http_client_error_status_raises(monkeypatch):
    client = HttpClient()
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(403))

    with pytest.raises(HttpRequestError):
        client.get_text("https://example.com")


def test_http_connection_error_is_wrapped(monkeypatch):
    client = HttpClient()

    def boom(**_kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(client.session, "request", boom)
    with pytest.raises(HttpRequestError):
        client.get_text("https://example.com")


def test_http_retries_only_when_configured(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.0, max_wait=0.0))
    responses = [FakeResponse(503), FakeResponse(502), FakeResponse(200, "[1]")]
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: responses.pop(0))

    assert client.get_text("https://example.com") == "[1]"
    assert responses == []


def test_http_default_does_not_retry(monkeypatch):
    client = HttpClient()
    calls = []

    def fake_request(**_kwargs):
        calls.append(1)
        return FakeResponse(503)

    monkeypatch.setattr(client.session, "request", fake_request)
    with pytest.raises(RetryableHttpError):
        client.get_text("https://example.com")
    assert len(calls) == 1


def test_http_client_installs_cookies():
    cookie = Cookie(".google.com", True, "/", True, 0, "__Secure-1PSID", "abc")
    with HttpClient(cookies=[cookie]) as client:
        assert client.session.cookies.get("__Secure-1PSID", domain=".google.com") == "abc"

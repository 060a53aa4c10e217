from __future__ import annotations

import logging
from pathlib import Path

import pytest

from locationsharing.client import LocationSharingClient
from locationsharing.common.config_loader import ClientConfig
from locationsharing.common.constants import MAP_RENDER_PB
from locationsharing.common.errors import (
    CookieError,
    InvalidBatteryLevelError,
    PersonNotFoundError,
    SessionExpiredError,
)
from locationsharing.common.http import HttpRequestError, RetryConfig, TimeoutConfig
from locationsharing.registry import Registry

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def _fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def _config(tmp_path: Path) -> ClientConfig:
    return ClientConfig(
        cookies_file=tmp_path / "cookies.txt",
        language="en",
        country_code="us",
        authuser="2",
        endpoint="https://example.test/maps/rpc/locationsharing/read",
        timeout=TimeoutConfig(),
        retry=RetryConfig(),
        log_level="INFO",
        log_file=None,
    )


class FakeHttpClient:
    def __init__(self, *bodies: str | Exception):
        self.bodies = list(bodies)
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def get_text(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        body = self.bodies.pop(0)
        if isinstance(body, Exception):
            raise body
        return body

    def close(self):
        self.closed = True


@pytest.mark.integration
def test_fetch_sends_session_parameters(tmp_path: Path):
    http = FakeHttpClient(_fixture("payload_ok.txt"))
    client = LocationSharingClient(_config(tmp_path), http_client=http)

    client.fetch()

    url, kwargs = http.calls[0]
    assert url == "https://example.test/maps/rpc/locationsharing/read"
    assert kwargs["params"] == {"authuser": "2", "hl": "en", "gl": "us", "pb": MAP_RENDER_PB}


@pytest.mark.integration
def test_get_all_people_lists_self_first(tmp_path: Path):
    client = LocationSharingClient(_config(tmp_path), http_client=FakeHttpClient(_fixture("payload_ok.txt")))

    people = client.get_all_people()

    assert len(people) == 3
    assert people[0].address == "10 Downing St, London"
    assert [person.full_name for person in people[1:]] == ["Alice Example", "Bob Example"]


@pytest.mark.integration
def test_lookups_by_name(tmp_path: Path):
    http = FakeHttpClient(*[_fixture("payload_ok.txt")] * 5)
    client = LocationSharingClient(_config(tmp_path), http_client=http)

    assert client.get_coordinates_by_nickname("Ali") == ("37.4219999", "-122.0840575")
    assert client.get_coordinates_by_fullname("Bob Example") == ("48.8583701", "2.2944813")
    assert client.get_authenticated_coordinates() == ("51.5072", "-0.1275")
    assert client.get_person_by_fullname("Bob Example").nick_name is None
    with pytest.raises(PersonNotFoundError):
        client.get_person_by_nickname("Carol")


@pytest.mark.integration
def test_stateless_client_keeps_nothing(tmp_path: Path):
    client = LocationSharingClient(_config(tmp_path), http_client=FakeHttpClient(_fixture("payload_ok.txt")))
    client.fetch()
    assert client.registry is None


@pytest.mark.integration
def test_try_refresh_keeps_last_known_good_snapshot(tmp_path: Path):
    registry = Registry()
    http = FakeHttpClient(
        _fixture("payload_ok.txt"),
        _fixture("payload_bad_battery.txt"),
        HttpRequestError("HTTP status: 403"),
        _fixture("payload_ok.txt"),
    )
    client = LocationSharingClient(_config(tmp_path), http_client=http, registry=registry)

    first = client.try_refresh()
    assert (first.updated, first.changed, first.error) == (True, True, None)
    before = registry.current_shared()

    failed_decode = client.try_refresh()
    assert failed_decode.updated is False
    assert isinstance(failed_decode.error, InvalidBatteryLevelError)
    assert registry.current_shared() == before

    failed_fetch = client.try_refresh()
    assert failed_fetch.updated is False
    assert isinstance(failed_fetch.error, HttpRequestError)

    unchanged = client.try_refresh()
    assert (unchanged.updated, unchanged.changed, unchanged.error) == (True, False, None)
    assert registry.find_by_nickname("Ali").battery_level == 85


@pytest.mark.integration
def test_refresh_requires_registry(tmp_path: Path):
    client = LocationSharingClient(_config(tmp_path), http_client=FakeHttpClient())
    with pytest.raises(Exception, match="registry"):
        client.refresh()


@pytest.mark.integration
def test_check_session_detects_sentinel(tmp_path: Path):
    client = LocationSharingClient(
        _config(tmp_path),
        http_client=FakeHttpClient(_fixture("payload_session_expired.txt")),
    )
    with pytest.raises(SessionExpiredError):
        client.check_session()


@pytest.mark.integration
def test_fetch_logs_decode_failure(tmp_path: Path, caplog):
    client = LocationSharingClient(
        _config(tmp_path),
        http_client=FakeHttpClient(_fixture("payload_truncated_entry.txt")),
        logger=logging.getLogger("locationsharing.test"),
    )
    with caplog.at_level(logging.INFO, logger="locationsharing.test"):
        with pytest.raises(Exception):
            client.fetch()

    failures = [record for record in caplog.records if getattr(record, "event", None) == "DECODE_FAIL"]
    assert failures[0].error_code == "TOO_SHORT"
    assert failures[0].path == "data[0][1]"


@pytest.mark.integration
def test_default_transport_loads_cookies(tmp_path: Path):
    client = LocationSharingClient(_config(tmp_path))
    with pytest.raises(CookieError):
        client.fetch_body()


@pytest.mark.integration
def test_close_leaves_injected_client_open(tmp_path: Path):
    http = FakeHttpClient()
    with LocationSharingClient(_config(tmp_path), http_client=http):
        pass
    assert http.closed is False

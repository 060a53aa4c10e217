"""Fetch-and-decode client over the location sharing endpoint."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import TracebackType

from locationsharing.common.config_loader import ClientConfig, load_config
from locationsharing.common.constants import MAP_RENDER_PB
from locationsharing.common.cookies import load_cookies
from locationsharing.common.errors import LocationSharingError, PersonNotFoundError
from locationsharing.common.http import HttpClient
from locationsharing.common.logging import log_event
from locationsharing.decode.person import SelfRecord, SharedRecord
from locationsharing.decode.pipeline import Snapshot, decode_top, load_top
from locationsharing.decode.session import validate_session
from locationsharing.registry import Registry, find_by_fullname, find_by_nickname


@dataclass(frozen=True)
class RefreshOutcome:
    updated: bool
    changed: bool = False
    error: LocationSharingError | None = None


class LocationSharingClient:
    """Reads the people sharing their location with the signed-in account.

    Without a registry every call fetches and returns fresh data. With one,
    each successful fetch also replaces the registry's snapshot.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_client: HttpClient | None = None,
        registry: Registry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.logger = logger or logging.getLogger("locationsharing")
        self._http_client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_config_file(
        cls,
        path: Path,
        *,
        overlay_path: Path | None = None,
        remember: bool = False,
        logger: logging.Logger | None = None,
    ) -> "LocationSharingClient":
        config = load_config(path, overlay_path=overlay_path)
        return cls(config, registry=Registry() if remember else None, logger=logger)

    def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self) -> "LocationSharingClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _client(self) -> HttpClient:
        if self._http_client is None:
            self._http_client = HttpClient(
                timeout=self.config.timeout,
                retry=self.config.retry,
                cookies=load_cookies(self.config.cookies_file),
            )
        return self._http_client

    def _params(self) -> dict[str, str]:
        return {
            "authuser": self.config.authuser,
            "hl": self.config.language,
            "gl": self.config.country_code,
            "pb": MAP_RENDER_PB,
        }

    def fetch_body(self) -> str:
        started = time.monotonic()
        log_event(self.logger, "fetch start", event="FETCH_START", status="ok")
        try:
            body = self._client().get_text(self.config.endpoint, params=self._params())
        except LocationSharingError as exc:
            log_event(
                self.logger,
                f"fetch failed: {exc}",
                event="FETCH_FAIL",
                status="error",
                error_code=exc.error_code,
                duration_ms=int((time.monotonic() - started) * 1000),
            )
            raise
        log_event(
            self.logger,
            "fetch ok",
            event="FETCH_OK",
            status="ok",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return body

    def check_session(self) -> None:
        validate_session(load_top(self.fetch_body()))

    def fetch(self) -> Snapshot:
        body = self.fetch_body()
        try:
            snapshot = decode_top(load_top(body))
        except LocationSharingError as exc:
            log_event(
                self.logger,
                f"decode failed: {exc}",
                event="DECODE_FAIL",
                status="error",
                path=getattr(exc, "path", None),
                error_code=exc.error_code,
            )
            raise
        log_event(
            self.logger,
            "decode ok",
            event="DECODE_OK",
            status="ok",
            has_self=snapshot.self_record is not None,
            shared_count=len(snapshot.shared),
        )
        if self.registry is not None:
            changed = self.registry.replace(snapshot)
            log_event(self.logger, "registry updated", event="REGISTRY_UPDATE", status="changed" if changed else "unchanged")
        return snapshot

    def refresh(self) -> bool:
        """Fetch into the registry and return whether the snapshot changed."""
        if self.registry is None:
            raise LocationSharingError("refresh() needs a client constructed with a registry")
        before = self.registry.snapshot()
        snapshot = self.fetch()
        return snapshot != before

    def try_refresh(self) -> RefreshOutcome:
        # A failed fetch or decode keeps the last-known-good snapshot; the
        # error is returned so callers can tell it apart from "no change".
        try:
            changed = self.refresh()
        except LocationSharingError as exc:
            return RefreshOutcome(updated=False, error=exc)
        return RefreshOutcome(updated=True, changed=changed)

    def get_all_people(self) -> list[SelfRecord | SharedRecord]:
        snapshot = self.fetch()
        people: list[SelfRecord | SharedRecord] = []
        if snapshot.self_record is not None:
            people.append(snapshot.self_record)
        people.extend(snapshot.shared)
        return people

    def get_shared_people(self) -> list[SharedRecord]:
        return list(self.fetch().shared)

    def get_authenticated_person(self) -> SelfRecord:
        record = self.fetch().self_record
        if record is None:
            raise PersonNotFoundError("The authenticated account reports no position")
        return record

    def get_person_by_nickname(self, nickname: str) -> SharedRecord:
        record = find_by_nickname(self.fetch().shared, nickname)
        if record is None:
            raise PersonNotFoundError(f"Nickname {nickname!r} is not found")
        return record

    def get_person_by_fullname(self, fullname: str) -> SharedRecord:
        record = find_by_fullname(self.fetch().shared, fullname)
        if record is None:
            raise PersonNotFoundError(f"Full name {fullname!r} is not found")
        return record

    def get_coordinates_by_nickname(self, nickname: str) -> tuple[str, str]:
        return self.get_person_by_nickname(nickname).coordinates

    def get_coordinates_by_fullname(self, fullname: str) -> tuple[str, str]:
        return self.get_person_by_fullname(fullname).coordinates

    def get_authenticated_coordinates(self) -> tuple[str, str]:
        return self.get_authenticated_person().coordinates

    def get_timestamp_by_nickname(self, nickname: str) -> datetime:
        return self.get_person_by_nickname(nickname).timestamp

    def get_timestamp_by_fullname(self, fullname: str) -> datetime:
        return self.get_person_by_fullname(fullname).timestamp

    def get_authenticated_timestamp(self) -> datetime:
        return self.get_authenticated_person().timestamp

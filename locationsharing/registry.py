"""Last-known-good snapshot of decoded positions."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Iterable

from locationsharing.decode.person import SelfRecord, SharedRecord
from locationsharing.decode.pipeline import Snapshot


def find_by_nickname(records: Iterable[SharedRecord], name: str) -> SharedRecord | None:
    if not name:
        return None
    for record in records:
        if record.nick_name == name:
            return record
    return None


def find_by_fullname(records: Iterable[SharedRecord], name: str) -> SharedRecord | None:
    if not name:
        return None
    for record in records:
        if record.full_name == name:
            return record
    return None


class Registry:
    """Holds one snapshot and swaps it whole under a lock.

    Records are frozen, so handing them out never exposes mutable state.
    Callers only update after a complete decode; a failed fetch therefore
    leaves the previous snapshot in place.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = Snapshot()

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    def replace(self, snapshot: Snapshot) -> bool:
        """Install ``snapshot``; return whether it differs from the previous one."""
        with self._lock:
            changed = snapshot != self._snapshot
            self._snapshot = snapshot
        return changed

    def update_self(self, record: SelfRecord) -> bool:
        if not isinstance(record, SelfRecord):
            raise TypeError(f"Expected SelfRecord, got {type(record).__name__}")
        with self._lock:
            changed = record != self._snapshot.self_record
            self._snapshot = replace(self._snapshot, self_record=record)
        return changed

    def update_shared(self, records: Iterable[SharedRecord]) -> bool:
        shared = tuple(records)
        for record in shared:
            if not isinstance(record, SharedRecord):
                raise TypeError(f"Expected SharedRecord, got {type(record).__name__}")
        with self._lock:
            changed = shared != self._snapshot.shared
            self._snapshot = replace(self._snapshot, shared=shared)
        return changed

    def current_self(self) -> SelfRecord | None:
        return self.snapshot().self_record

    def current_shared(self) -> list[SharedRecord]:
        return list(self.snapshot().shared)

    def find_by_nickname(self, name: str) -> SharedRecord | None:
        return find_by_nickname(self.snapshot().shared, name)

    def find_by_fullname(self, name: str) -> SharedRecord | None:
        return find_by_fullname(self.snapshot().shared, name)

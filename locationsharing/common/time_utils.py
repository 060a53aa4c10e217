"""Epoch conversion and log timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def epoch_ms_to_local(epoch_ms: int) -> datetime:
    """Convert milliseconds since the Unix epoch to an aware datetime.

    The result is expressed in the local timezone of the running process, so
    the wall-clock fields depend on the host. Comparisons between aware
    datetimes are still instant-based.
    """
    return (EPOCH + timedelta(milliseconds=epoch_ms)).astimezone()

"""Isolation of the JSON array inside a raw response body."""

from __future__ import annotations

from locationsharing.common.errors import NoArrayFoundError


def extract_array(body: str) -> str:
    """Return ``body`` from its first ``[`` through its last ``]``, inclusive.

    The backend prefixes the payload with a non-JSON guard line. This is a
    textual cut only; whether the result parses is decided later.
    """
    start = body.find("[")
    if start == -1:
        raise NoArrayFoundError(len(body))
    end = body.rfind("]")
    if end < start:
        raise NoArrayFoundError(len(body))
    return body[start : end + 1]

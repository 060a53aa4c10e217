"""Single decode pass from a response body to a complete snapshot."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from dataclasses import dataclass

from locationsharing.common.constants import SELF_SLOT_OFFSET, SHARED_PEOPLE_OFFSET
from locationsharing.common.errors import PayloadParseError
from locationsharing.decode.extract import extract_array
from locationsharing.decode.person import SelfRecord, SharedRecord, decode_self, decode_shared
from locationsharing.decode.session import validate_session
from locationsharing.decode.view import JsonArrayView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    self_record: SelfRecord | None = None
    shared: tuple[SharedRecord, ...] = ()


def parse_payload(text: str) -> JsonArrayView:
    # Decimal keeps the digits received; coordinates are never round-tripped through float.
    try:
        node = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise PayloadParseError(f"Received invalid payload, cannot parse: {exc}") from exc
    if not isinstance(node, list):
        raise PayloadParseError(f"Payload top level is {type(node).__name__}, expected an array")
    return JsonArrayView(node, "data")


def load_top(body: str) -> JsonArrayView:
    return parse_payload(extract_array(body))


def decode_shared_people(top: JsonArrayView) -> list[SharedRecord]:
    people = top.child(SHARED_PEOPLE_OFFSET)
    if people.absent:
        return []
    people.require_min_len(1)
    return [decode_shared(people.child(i)) for i in range(people.length)]


def decode_top(top: JsonArrayView) -> Snapshot:
    validate_session(top)
    self_record = None
    if not top.is_absent_at(SELF_SLOT_OFFSET):
        self_record = decode_self(top)
    shared = decode_shared_people(top)
    logger.debug("decoded payload: self=%s shared=%d", self_record is not None, len(shared))
    return Snapshot(self_record=self_record, shared=tuple(shared))


def decode_body(body: str) -> Snapshot:
    """Extract, parse, validate and decode ``body`` in one pass.

    Either every record decodes or an error is raised; no partial snapshot
    is ever returned.
    """
    return decode_top(load_top(body))

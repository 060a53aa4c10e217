"""Decoding of positional person entries into typed records.

The backend identifies fields by array offset only, and two layouts exist:

* the authenticated account's own slot (top-level offset 9), whose offset 0
  is empty and whose position block sits at offset 1;
* an entry of the shared-people list (top-level offset 0), which carries an
  identity block at offset 0, the position block at offset 1, a name block at
  offset 6 and a device block at offset 13.

The payload never says which layout a slot uses. ``detect_shape`` infers it
once from offset 0, and each decoder refuses the other layout.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from locationsharing.common.constants import SELF_SLOT_OFFSET
from locationsharing.common.errors import (
    AmbiguousVariantError,
    InvalidBatteryLevelError,
    MissingCoordinateError,
    MissingTimestampError,
)
from locationsharing.common.time_utils import epoch_ms_to_local
from locationsharing.decode.view import JsonArrayView, as_view

logger = logging.getLogger(__name__)

# Slot / entry offsets.
IDENTITY_BLOCK = 0
POSITION_BLOCK = 1
NAME_BLOCK = 6
DEVICE_BLOCK = 13

SELF_SLOT_MIN_LEN = 2
SHARED_ENTRY_MIN_LEN = DEVICE_BLOCK + 1

# Position block offsets.
POSITION_COORDS = 1
POSITION_TIMESTAMP = 2
POSITION_ACCURACY = 3
POSITION_ADDRESS = 4
POSITION_COUNTRY_CODE = 6

SELF_POSITION_MIN_LEN = 8
SHARED_POSITION_MIN_LEN = 7

# Coordinates block offsets.
COORD_LONGITUDE = 1
COORD_LATITUDE = 2
COORDS_MIN_LEN = 3

IDENTITY_ID = 0
IDENTITY_PICTURE_URL = 1
IDENTITY_FULL_NAME = 3
IDENTITY_MIN_LEN = 4

NAME_NICK_NAME = 3
NAME_MIN_LEN = 4

DEVICE_CHARGING = 0
DEVICE_BATTERY_LEVEL = 1

CHARGING_FLAGS = {"0": False, "1": True}

DECIMAL_INTEGER = re.compile(r"[+-]?[0-9]+")


class Shape(Enum):
    SELF = "self"
    SHARED = "shared"


@dataclass(frozen=True)
class PositionRecord:
    latitude: str
    longitude: str
    timestamp: datetime
    accuracy: str | None = None
    address: str | None = None
    country_code: str | None = None

    @property
    def coordinates(self) -> tuple[str, str]:
        return self.latitude, self.longitude

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["timestamp"] = self.timestamp.isoformat()
        return out


@dataclass(frozen=True)
class SelfRecord(PositionRecord):
    """The authenticated account's own position."""


@dataclass(frozen=True)
class SharedRecord(PositionRecord):
    """Position of an account sharing its location with the authenticated one."""

    id: str | None = None
    picture_url: str | None = None
    full_name: str | None = None
    nick_name: str | None = None
    charging: bool | None = None
    battery_level: int | None = None


def parse_decimal(text: str | None) -> int | None:
    """Parse ASCII base-10 digits with an optional sign; anything else is None."""
    if text is None:
        return None
    text = text.strip()
    if not DECIMAL_INTEGER.fullmatch(text):
        return None
    return int(text)


def detect_shape(slot: JsonArrayView) -> Shape:
    if slot.is_absent_at(IDENTITY_BLOCK):
        return Shape.SELF
    return Shape.SHARED


def decode_timestamp(block: JsonArrayView, index: int = POSITION_TIMESTAMP) -> datetime:
    raw = block.at(index)
    epoch_ms = parse_decimal(block.string_at(index))
    if not epoch_ms:
        raise MissingTimestampError(path=block.child_path(index), raw=raw)
    try:
        return epoch_ms_to_local(epoch_ms)
    except (OverflowError, OSError) as exc:
        raise MissingTimestampError(path=block.child_path(index), raw=raw) from exc


def decode_charging(device: JsonArrayView) -> bool | None:
    return CHARGING_FLAGS.get(device.string_at(DEVICE_CHARGING))


def decode_battery_level(device: JsonArrayView) -> int | None:
    if device.length <= DEVICE_BATTERY_LEVEL:
        return None
    level = parse_decimal(device.string_at(DEVICE_BATTERY_LEVEL))
    if level is None:
        raise InvalidBatteryLevelError(
            path=device.child_path(DEVICE_BATTERY_LEVEL),
            raw=device.at(DEVICE_BATTERY_LEVEL),
        )
    return level


def _required_coordinate(coords: JsonArrayView, index: int) -> str:
    value = coords.string_at(index)
    if value is None:
        raise MissingCoordinateError(path=coords.child_path(index))
    return value


def _decode_position(block: JsonArrayView, min_len: int) -> dict[str, Any]:
    block.require_min_len(min_len)
    coords = block.child(POSITION_COORDS).require_min_len(COORDS_MIN_LEN)
    return {
        "latitude": _required_coordinate(coords, COORD_LATITUDE),
        "longitude": _required_coordinate(coords, COORD_LONGITUDE),
        "timestamp": decode_timestamp(block, POSITION_TIMESTAMP),
        "accuracy": block.string_at(POSITION_ACCURACY),
        "address": block.string_at(POSITION_ADDRESS),
        "country_code": block.string_at(POSITION_COUNTRY_CODE),
    }


def decode_self(top: JsonArrayView | Any) -> SelfRecord:
    """Decode the authenticated account's slot of a top-level payload."""
    top = as_view(top, "data")
    slot = top.child(SELF_SLOT_OFFSET).require_min_len(SELF_SLOT_MIN_LEN)
    shape = detect_shape(slot)
    if shape is not Shape.SELF:
        raise AmbiguousVariantError(path=slot.path, expected=Shape.SELF.value, actual=shape.value)
    position = _decode_position(slot.child(POSITION_BLOCK), SELF_POSITION_MIN_LEN)
    logger.debug("decoded self record from %s", slot.path)
    return SelfRecord(**position)


def decode_shared(entry: JsonArrayView | Any) -> SharedRecord:
    """Decode one entry of the shared-people list."""
    entry = as_view(entry, "entry")
    entry.require_min_len(SHARED_ENTRY_MIN_LEN)
    shape = detect_shape(entry)
    if shape is not Shape.SHARED:
        raise AmbiguousVariantError(path=entry.path, expected=Shape.SHARED.value, actual=shape.value)

    identity = entry.child(IDENTITY_BLOCK).require_min_len(IDENTITY_MIN_LEN)
    position = _decode_position(entry.child(POSITION_BLOCK), SHARED_POSITION_MIN_LEN)

    nick_name = None
    names = entry.child(NAME_BLOCK)
    if not names.absent:
        nick_name = names.require_min_len(NAME_MIN_LEN).string_at(NAME_NICK_NAME)

    charging = None
    battery_level = None
    device = entry.child(DEVICE_BLOCK)
    if not device.absent:
        device.require_min_len(1)
        charging = decode_charging(device)
        battery_level = decode_battery_level(device)

    logger.debug("decoded shared record from %s", entry.path)
    return SharedRecord(
        **position,
        id=identity.string_at(IDENTITY_ID),
        picture_url=identity.string_at(IDENTITY_PICTURE_URL),
        full_name=identity.string_at(IDENTITY_FULL_NAME),
        nick_name=nick_name,
        charging=charging,
        battery_level=battery_level,
    )

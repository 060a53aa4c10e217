"""Read-only positional access over parsed JSON arrays."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from locationsharing.common.errors import TooShortError


def is_absent(node: Any) -> bool:
    """True for every encoding the payload uses for "no value".

    ``null``, ``[]``, ``{}`` and ``""`` are used interchangeably.
    """
    if node is None:
        return True
    if isinstance(node, (list, dict, str)) and len(node) == 0:
        return True
    return False


class JsonArrayView:
    """A parsed JSON node plus the breadcrumb path that led to it."""

    __slots__ = ("node", "path")

    def __init__(self, node: Any, path: str = "data") -> None:
        self.node = node
        self.path = path

    def __repr__(self) -> str:
        return f"JsonArrayView(path={self.path!r}, length={self.length})"

    @property
    def is_array(self) -> bool:
        return isinstance(self.node, list)

    @property
    def length(self) -> int:
        return len(self.node) if isinstance(self.node, list) else 0

    @property
    def absent(self) -> bool:
        return is_absent(self.node)

    def child_path(self, index: int) -> str:
        return f"{self.path}[{index}]"

    def at(self, index: int) -> Any | None:
        if not isinstance(self.node, list) or index < 0 or index >= len(self.node):
            return None
        return self.node[index]

    def child(self, index: int) -> "JsonArrayView":
        return JsonArrayView(self.at(index), self.child_path(index))

    def is_absent_at(self, index: int) -> bool:
        return is_absent(self.at(index))

    def string_at(self, index: int) -> str | None:
        """Scalar at ``index`` as text; ``None`` when absent or not a scalar."""
        value = self.at(index)
        if is_absent(value) or isinstance(value, (list, dict, bool)):
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return None

    def require_min_len(self, n: int) -> "JsonArrayView":
        actual = self.length
        if actual < n:
            raise TooShortError(expected=n, actual=actual, path=self.path)
        return self


def as_view(node: Any, path: str) -> JsonArrayView:
    if isinstance(node, JsonArrayView):
        return node
    return JsonArrayView(node, path)

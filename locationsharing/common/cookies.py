"""Netscape cookies.txt loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from locationsharing.common.constants import REQUIRED_COOKIE_NAMES
from locationsharing.common.errors import CookieError
from locationsharing.common.fs import read_lines

# Browsers export HttpOnly cookies with this marker, which looks like a comment.
HTTP_ONLY_PREFIX = "#HttpOnly_"


@dataclass(frozen=True)
class Cookie:
    domain: str
    include_subdomains: bool
    path: str
    secure: bool
    expiry: int
    name: str
    value: str
    http_only: bool = False


def _flag(value: str) -> bool:
    return value.upper() == "TRUE"


def parse_cookie_line(line: str, *, line_no: int = 0) -> Cookie:
    http_only = line.startswith(HTTP_ONLY_PREFIX)
    if http_only:
        line = line[len(HTTP_ONLY_PREFIX) :]
    fields = line.split()
    if len(fields) < 7:
        raise CookieError(f"Cookie line {line_no} has {len(fields)} fields, expected 7")
    try:
        expiry = int(fields[4])
    except ValueError as exc:
        raise CookieError(f"Cookie line {line_no} has a non-integer expiry: {fields[4]!r}") from exc
    return Cookie(
        domain=fields[0],
        include_subdomains=_flag(fields[1]),
        path=fields[2],
        secure=_flag(fields[3]),
        expiry=expiry,
        name=fields[5],
        value=fields[6],
        http_only=http_only,
    )


def parse_cookies(lines: Iterable[str]) -> list[Cookie]:
    cookies: list[Cookie] = []
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        if line.startswith("#") and not line.startswith(HTTP_ONLY_PREFIX):
            continue
        cookies.append(parse_cookie_line(line, line_no=line_no))
    return cookies


def validate_required_cookies(cookies: list[Cookie], required: Iterable[str] = REQUIRED_COOKIE_NAMES) -> None:
    names = {cookie.name for cookie in cookies}
    for name in required:
        if name not in names:
            raise CookieError(f"Missing {name} cookie")


def load_cookies(path: Path) -> list[Cookie]:
    path = path.expanduser().resolve()
    if not path.exists():
        raise CookieError(f"Cookie file not found: {path}")
    cookies = parse_cookies(read_lines(path))
    validate_required_cookies(cookies)
    return cookies

"""Domain errors and failure typing."""

from __future__ import annotations


class LocationSharingError(Exception):
    """Base class for library failures."""

    error_code = "LOCATION_SHARING_ERROR"


class ConfigError(LocationSharingError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class CookieError(ConfigError):
    """Raised when the cookie file is unreadable, malformed or incomplete."""

    error_code = "COOKIE_ERROR"


class ExtractError(LocationSharingError):
    """Raised when no candidate payload can be isolated from a response body."""

    error_code = "EXTRACT_ERROR"


class NoArrayFoundError(ExtractError):
    error_code = "NO_ARRAY_FOUND"

    def __init__(self, body_length: int) -> None:
        self.body_length = body_length
        super().__init__(f"No bracketed array found in response body ({body_length} chars)")


class PayloadParseError(LocationSharingError):
    """Raised when the extracted payload is not a JSON array."""

    error_code = "PAYLOAD_PARSE_ERROR"


class StructuralError(LocationSharingError):
    """Raised when the payload shape does not reach a required depth."""

    error_code = "STRUCTURAL_ERROR"

    def __init__(self, message: str, *, path: str) -> None:
        self.path = path
        super().__init__(message)


class TooShortError(StructuralError):
    error_code = "TOO_SHORT"

    def __init__(self, *, expected: int, actual: int, path: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{path} is too short: expected at least {expected} elements, got {actual}",
            path=path,
        )


class AuthError(LocationSharingError):
    """Raised when the session-validity heuristic fails."""

    error_code = "AUTH_ERROR"


class MissingFieldError(AuthError):
    error_code = "AUTH_MISSING_FIELD"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Could not read session field at {path}, the payload does not look valid")


class SessionExpiredError(AuthError):
    error_code = "SESSION_EXPIRED"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Session field at {path} holds the unauthenticated sentinel, the session is not valid")


class DecodeError(LocationSharingError):
    """Raised for semantic decode failures beyond a structural shortfall."""

    error_code = "DECODE_ERROR"

    def __init__(self, message: str, *, path: str) -> None:
        self.path = path
        super().__init__(message)


class MissingTimestampError(DecodeError):
    error_code = "MISSING_TIMESTAMP"

    def __init__(self, *, path: str, raw: object) -> None:
        self.raw = raw
        super().__init__(f"{path} holds no usable timestamp (raw value: {raw!r})", path=path)


class MissingCoordinateError(DecodeError):
    error_code = "MISSING_COORDINATE"

    def __init__(self, *, path: str) -> None:
        super().__init__(f"{path} holds no coordinate value", path=path)


class InvalidBatteryLevelError(DecodeError):
    error_code = "INVALID_BATTERY_LEVEL"

    def __init__(self, *, path: str, raw: object) -> None:
        self.raw = raw
        super().__init__(f"{path} is not an integer battery level (raw value: {raw!r})", path=path)


class AmbiguousVariantError(DecodeError):
    error_code = "AMBIGUOUS_VARIANT"

    def __init__(self, *, path: str, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"{path} has {actual} shape, expected {expected} shape", path=path)


class PersonNotFoundError(LocationSharingError, LookupError):
    error_code = "PERSON_NOT_FOUND"

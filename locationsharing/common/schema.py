"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from locationsharing.common.errors import ConfigError

SECTION_KEYS = {
    "session": {"cookies_file", "language", "country_code", "authuser"},
    "http": {"endpoint", "timeout", "retry"},
    "logging": {"level", "log_file"},
}
TIMEOUT_KEYS = {"connect", "read"}
RETRY_KEYS = {"max_attempts", "multiplier", "max_wait"}
LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_positive_number(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_client_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "config")
    _assert_required_keys(cfg, set(SECTION_KEYS), "config")
    _assert_no_unknown_keys(cfg, set(SECTION_KEYS), "config", allow_unknown)

    for section, keys in SECTION_KEYS.items():
        _assert_mapping(cfg[section], section)
        _assert_required_keys(cfg[section], keys, section)
        _assert_no_unknown_keys(cfg[section], keys, section, allow_unknown)

    _assert_mapping(cfg["http"]["timeout"], "http.timeout")
    _assert_required_keys(cfg["http"]["timeout"], TIMEOUT_KEYS, "http.timeout")
    for key in TIMEOUT_KEYS:
        _assert_positive_number(cfg["http"]["timeout"][key], f"http.timeout.{key}")

    _assert_mapping(cfg["http"]["retry"], "http.retry")
    _assert_required_keys(cfg["http"]["retry"], RETRY_KEYS, "http.retry")
    max_attempts = cfg["http"]["retry"]["max_attempts"]
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ConfigError("http.retry.max_attempts must be an integer >= 1")

    if str(cfg["logging"]["level"]).upper() not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(sorted(LOG_LEVELS))}")

    return cfg

"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from locationsharing.common.errors import ConfigError
from locationsharing.common.fs import read_yaml
from locationsharing.common.http import RetryConfig, TimeoutConfig
from locationsharing.common.schema import validate_client_config


@dataclass(frozen=True)
class ClientConfig:
    cookies_file: Path
    language: str
    country_code: str
    authuser: str
    endpoint: str
    timeout: TimeoutConfig
    retry: RetryConfig
    log_level: str
    log_file: Path | None


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config_yaml(path: Path) -> Any:
    try:
        return read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file is not valid YAML: {path}") from exc


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = _read_config_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_config_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def build_client_config(cfg: dict, *, base_dir: Path | None = None) -> ClientConfig:
    session = cfg["session"]
    http = cfg["http"]
    cookies_file = Path(session["cookies_file"])
    if base_dir is not None and not cookies_file.is_absolute():
        cookies_file = base_dir / cookies_file
    log_file = cfg["logging"]["log_file"]
    return ClientConfig(
        cookies_file=cookies_file,
        language=str(session["language"]),
        country_code=str(session["country_code"]),
        authuser=str(session["authuser"]),
        endpoint=str(http["endpoint"]),
        timeout=TimeoutConfig(
            connect=float(http["timeout"]["connect"]),
            read=float(http["timeout"]["read"]),
        ),
        retry=RetryConfig(
            max_attempts=int(http["retry"]["max_attempts"]),
            multiplier=float(http["retry"]["multiplier"]),
            max_wait=float(http["retry"]["max_wait"]),
        ),
        log_level=str(cfg["logging"]["level"]).upper(),
        log_file=Path(log_file) if log_file else None,
    )


def load_config(
    path: Path,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> ClientConfig:
    cfg = validate_client_config(_load_yaml_with_overlay(path, overlay_path), allow_unknown=allow_unknown)
    return build_client_config(cfg, base_dir=path.parent)

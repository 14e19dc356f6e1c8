"""YAML config loader with environment variable interpolation."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cloudera_exporter.config.models import ExporterConfig

CONFIG_FILENAME = ".cloudera_exporter.yaml"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

# Maps CLI override keys onto (section, field) in ExporterConfig.
_OVERRIDE_FIELDS: dict[str, tuple[str | None, str]] = {
    "listen_address": ("web", "listen_address"),
    "telemetry_path": ("web", "telemetry_path"),
    "uri": ("cloudera", "uri"),
    "user": ("cloudera", "user"),
    "password": ("cloudera", "password"),
    "cluster_name": ("cloudera", "cluster_name"),
    "timeout": ("cloudera", "timeout"),
    "interval": ("poll", "interval"),
    "mode": ("metrics", "mode"),
    "log_level": (None, "log_level"),
}


def _interpolate_env(value: str) -> str:
    """Replace ${VAR} and ${VAR:-default} patterns with environment values."""

    def _replace(match: re.Match[str]) -> str:
        expr = match.group(1)
        if ":-" in expr:
            var_name, default = expr.split(":-", 1)
            return os.environ.get(var_name.strip(), default)
        return os.environ.get(expr.strip(), match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(data: Any) -> Any:
    """Walk a nested data structure and interpolate env vars in strings."""
    if isinstance(data, str):
        return _interpolate_env(data)
    if isinstance(data, dict):
        return {k: _interpolate_recursive(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_interpolate_recursive(item) for item in data]
    return data


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default cwd) looking for .cloudera_exporter.yaml."""
    current = (start or Path.cwd()).resolve()
    for ancestor in [current, *current.parents]:
        candidate = ancestor / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path | None = None) -> ExporterConfig:
    """Load and validate the config file, applying env-var interpolation."""
    config_path = path or find_config_file()
    if not config_path or not config_path.exists():
        raise FileNotFoundError(
            f"Could not find {CONFIG_FILENAME}. Create one or specify a path with --config."
        )
    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    data = _interpolate_recursive(raw)
    try:
        return ExporterConfig(**data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {config_path}: {exc}") from exc


def load_config_or_default(path: Path | None = None) -> ExporterConfig:
    """Like load_config, but fall back to defaults when no file exists.

    An explicitly given *path* that does not exist is still an error.
    """
    if path is None and find_config_file() is None:
        return ExporterConfig()
    return load_config(path)


def apply_overrides(config: ExporterConfig, **overrides: Any) -> ExporterConfig:
    """Return a copy of *config* with non-None overrides applied and re-validated."""
    data = config.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in _OVERRIDE_FIELDS:
            raise KeyError(f"Unknown config override: {key}")
        section, field = _OVERRIDE_FIELDS[key]
        target = data if section is None else data[section]
        target[field] = value
    try:
        return ExporterConfig(**data)
    except ValidationError as exc:
        raise ValueError(f"Invalid option: {exc}") from exc


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address; an empty host binds all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address {address!r}, expected [host]:port")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)

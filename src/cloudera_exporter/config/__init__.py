"""Exporter configuration system."""

from cloudera_exporter.config.loader import (
    apply_overrides,
    find_config_file,
    load_config,
    load_config_or_default,
    parse_listen_address,
)
from cloudera_exporter.config.models import (
    ClouderaConfig,
    ExporterConfig,
    MetricsConfig,
    PollConfig,
    RegistryMode,
    WebConfig,
)

__all__ = [
    "ClouderaConfig",
    "ExporterConfig",
    "MetricsConfig",
    "PollConfig",
    "RegistryMode",
    "WebConfig",
    "apply_overrides",
    "find_config_file",
    "load_config",
    "load_config_or_default",
    "parse_listen_address",
]

"""Pydantic models for exporter configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_STATIC_SERVICES: list[str] = [
    "hdfs",
    "impala",
    "yarn",
    "spark_on_yarn",
    "hive",
    "zookeeper",
    "hue",
    "oozie",
    "hbase",
    "kafka",
    "solr",
    "sentry",
    "sqoop_client",
    "flume",
    "ks_indexer",
]


class RegistryMode(str, Enum):
    """How service names map onto exported gauges."""

    DYNAMIC = "dynamic"
    STATIC = "static"


class WebConfig(BaseModel):
    """Scrape endpoint configuration."""

    listen_address: str = ":9107"
    telemetry_path: str = "/metrics"

    @field_validator("telemetry_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("telemetry_path must start with '/'")
        if value in ("/", "/health"):
            raise ValueError(f"telemetry_path cannot be the reserved path {value!r}")
        return value


class ClouderaConfig(BaseModel):
    """Connection settings for the Cloudera Manager API."""

    uri: str = "http://localhost:7180"
    user: str = "admin"
    password: str = ""
    cluster_name: str = "Cluster 1"
    timeout: float = Field(default=5.0, gt=0)


class PollConfig(BaseModel):
    """Poll scheduler settings."""

    interval: float = Field(default=10.0, gt=0)


class MetricsConfig(BaseModel):
    """Metric registry settings."""

    mode: RegistryMode = RegistryMode.DYNAMIC
    services: list[str] = Field(default_factory=lambda: list(DEFAULT_STATIC_SERVICES))
    export_health_checks: bool = False


class ExporterConfig(BaseModel):
    """Root configuration model for .cloudera_exporter.yaml."""

    web: WebConfig = Field(default_factory=WebConfig)
    cloudera: ClouderaConfig = Field(default_factory=ClouderaConfig)
    poll: PollConfig = Field(default_factory=PollConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

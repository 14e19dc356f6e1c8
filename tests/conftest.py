"""Shared fixtures for exporter tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from cloudera_exporter.config.models import ExporterConfig
from cloudera_exporter.health.models import HealthDocument
from cloudera_exporter.metrics.registry import DynamicMetricRegistry, StaticMetricRegistry


def make_service(name: str, summary: str = "GOOD", **extra: Any) -> Dict[str, Any]:
    """Build one services-endpoint item the way Cloudera Manager returns it."""
    item: Dict[str, Any] = {
        "name": name,
        "type": name.upper(),
        "clusterRef": {"clusterName": "cluster"},
        "serviceUrl": f"http://cm:7180/cmf/serviceRedirect/{name}",
        "serviceState": "STARTED",
        "healthSummary": summary,
        "healthChecks": [{"name": f"{name.upper()}_CANARY_HEALTH", "summary": summary}],
        "configStale": False,
    }
    item.update(extra)
    return item


SAMPLE_PAYLOAD: Dict[str, Any] = {
    "items": [
        make_service("hdfs", "GOOD"),
        make_service("yarn", "CONCERNING"),
    ]
}

SAMPLE_CONFIG: Dict[str, Any] = {
    "web": {"listen_address": ":9107", "telemetry_path": "/metrics"},
    "cloudera": {
        "uri": "http://cm.example.com:7180",
        "user": "admin",
        "password": "secret",
        "cluster_name": "Cluster 1",
        "timeout": 2.0,
    },
    "poll": {"interval": 10},
    "metrics": {"mode": "dynamic", "export_health_checks": False},
}


@pytest.fixture()
def sample_payload() -> Dict[str, Any]:
    return SAMPLE_PAYLOAD


@pytest.fixture()
def sample_document() -> HealthDocument:
    return HealthDocument.model_validate(SAMPLE_PAYLOAD)


@pytest.fixture()
def sample_config() -> ExporterConfig:
    """Return a parsed ExporterConfig from sample data."""
    return ExporterConfig(**SAMPLE_CONFIG)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write sample config to a temp .cloudera_exporter.yaml and return the path."""
    path = tmp_path / ".cloudera_exporter.yaml"
    with path.open("w") as fh:
        yaml.dump(SAMPLE_CONFIG, fh)
    return path


@pytest.fixture()
def dynamic_registry() -> DynamicMetricRegistry:
    return DynamicMetricRegistry()


@pytest.fixture()
def static_registry() -> StaticMetricRegistry:
    return StaticMetricRegistry(["hdfs", "yarn", "impala"])

"""Metric registries holding the exported service health gauges.

A registry owns its own ``prometheus_client.CollectorRegistry``; nothing is
registered on the library's global default registry. Every write and read
goes through prometheus_client metric objects, which guard each value with
a lock, so the poll task and concurrent scrape handlers can share one
instance freely.
"""

from __future__ import annotations

import platform
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    PlatformCollector,
    ProcessCollector,
)

from cloudera_exporter import __version__
from cloudera_exporter.config.models import MetricsConfig, RegistryMode
from cloudera_exporter.errors import UnknownServiceError

NAMESPACE = "cloudera"
SUBSYSTEM = "services"


class MetricRegistry(ABC):
    """Process-scoped set of service health gauges plus exporter self-metrics."""

    mode: RegistryMode

    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        ProcessCollector(registry=self._registry)
        PlatformCollector(registry=self._registry)

        build = Info(
            "cloudera_exporter_build",
            "Build information of the cloudera exporter.",
            registry=self._registry,
        )
        build.info({"version": __version__, "python_version": platform.python_version()})

        self._checks = Gauge(
            "health_check",
            "Health of a single Cloudera health check (1=GOOD, 0=otherwise).",
            ["service", "check"],
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=self._registry,
        )
        self.last_poll_success = Gauge(
            "cloudera_exporter_last_poll_success",
            "Whether the most recent poll of the Cloudera API succeeded.",
            registry=self._registry,
        )
        self.last_poll_timestamp = Gauge(
            "cloudera_exporter_last_poll_timestamp_seconds",
            "Unix time of the most recent successful poll.",
            registry=self._registry,
        )
        self.poll_errors = Counter(
            "cloudera_exporter_poll_errors",
            "Failed poll cycles by error type.",
            ["error"],
            registry=self._registry,
        )
        self.poll_duration = Histogram(
            "cloudera_exporter_poll_duration_seconds",
            "Duration of poll cycles.",
            registry=self._registry,
        )

    @property
    def collector_registry(self) -> CollectorRegistry:
        return self._registry

    def check_names(self, names: Iterable[str]) -> None:
        """Raise UnknownServiceError if any of *names* cannot be recorded."""

    @abstractmethod
    def set(self, name: str, value: float) -> None: ...

    @abstractmethod
    def get(self, name: str) -> float | None: ...

    @abstractmethod
    def names(self) -> list[str]: ...

    def snapshot(self) -> dict[str, float]:
        out: dict[str, float] = {}
        for name in self.names():
            value = self.get(name)
            if value is not None:
                out[name] = value
        return out

    def set_check(self, service: str, check: str, value: float) -> None:
        self._checks.labels(service=service, check=check).set(value)

    def get_check(self, service: str, check: str) -> float | None:
        return self._registry.get_sample_value(
            f"{NAMESPACE}_{SUBSYSTEM}_health_check",
            {"service": service, "check": check},
        )

    def record_success(self, timestamp: float, duration: float) -> None:
        self.last_poll_success.set(1)
        self.last_poll_timestamp.set(timestamp)
        self.poll_duration.observe(duration)

    def record_failure(self, error: str, duration: float) -> None:
        self.last_poll_success.set(0)
        self.poll_errors.labels(error=error).inc()
        self.poll_duration.observe(duration)


class DynamicMetricRegistry(MetricRegistry):
    """One gauge family labelled by service name; accepts any name."""

    mode = RegistryMode.DYNAMIC
    metric_name = f"{NAMESPACE}_{SUBSYSTEM}_service_health"

    def __init__(self) -> None:
        super().__init__()
        self._gauge = Gauge(
            "service_health",
            "Health of a Cloudera service (1=GOOD, 0=otherwise).",
            ["name"],
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=self._registry,
        )
        self._names: set[str] = set()
        self._lock = threading.Lock()

    def set(self, name: str, value: float) -> None:
        self._gauge.labels(name=name).set(value)
        with self._lock:
            self._names.add(name)

    def get(self, name: str) -> float | None:
        return self._registry.get_sample_value(self.metric_name, {"name": name})

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._names)

    def snapshot(self) -> dict[str, float]:
        # Reads only this family instead of collecting the whole registry per name.
        out: dict[str, float] = {}
        for family in self._gauge.collect():
            for sample in family.samples:
                out[sample.labels["name"]] = sample.value
        return out


class StaticMetricRegistry(MetricRegistry):
    """One named gauge per pre-declared service; unknown names are rejected."""

    mode = RegistryMode.STATIC

    def __init__(self, services: Iterable[str]) -> None:
        super().__init__()
        self._gauges: dict[str, Gauge] = {}
        for name in services:
            if name in self._gauges:
                continue
            self._gauges[name] = Gauge(
                f"{name}_service",
                f"Health of the {name} system.",
                namespace=NAMESPACE,
                subsystem=SUBSYSTEM,
                registry=self._registry,
            )

    @staticmethod
    def gauge_name(name: str) -> str:
        return f"{NAMESPACE}_{SUBSYSTEM}_{name}_service"

    def check_names(self, names: Iterable[str]) -> None:
        for name in names:
            if name not in self._gauges:
                raise UnknownServiceError(name)

    def set(self, name: str, value: float) -> None:
        gauge = self._gauges.get(name)
        if gauge is None:
            raise UnknownServiceError(name)
        gauge.set(value)

    def get(self, name: str) -> float | None:
        if name not in self._gauges:
            return None
        return self._registry.get_sample_value(self.gauge_name(name))

    def names(self) -> list[str]:
        return list(self._gauges)


def create_registry(config: MetricsConfig) -> MetricRegistry:
    """Build the registry selected by ``config.mode``."""
    if config.mode == RegistryMode.STATIC:
        return StaticMetricRegistry(config.services)
    return DynamicMetricRegistry()

"""Data models for the Cloudera Manager services document."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class HealthSummary(str, Enum):
    """Health states reported by Cloudera Manager."""

    GOOD = "GOOD"
    CONCERNING = "CONCERNING"
    BAD = "BAD"
    DISABLED = "DISABLED"
    UNKNOWN = "UNKNOWN"
    NOT_AVAILABLE = "NOT_AVAILABLE"


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class HealthCheck(_ApiModel):
    """One diagnostic sub-check within a service."""

    name: str
    summary: str = HealthSummary.UNKNOWN.value


class ClusterRef(_ApiModel):
    cluster_name: str = Field(default="", alias="clusterName")


class Service(_ApiModel):
    """A single service entry of the ``services`` endpoint."""

    name: str
    kind: str = Field(default="", alias="type")
    cluster_ref: ClusterRef = Field(default_factory=ClusterRef, alias="clusterRef")
    service_url: str = Field(default="", alias="serviceUrl")
    service_state: str = Field(default="", alias="serviceState")
    # Free string: summaries this exporter does not know still project to unhealthy.
    health_summary: str = Field(default=HealthSummary.UNKNOWN.value, alias="healthSummary")
    health_checks: tuple[HealthCheck, ...] = Field(default=(), alias="healthChecks")
    config_stale: bool = Field(default=False, alias="configStale")

    @property
    def is_good(self) -> bool:
        return self.health_summary == HealthSummary.GOOD.value


class HealthDocument(_ApiModel):
    """Root of one poll response."""

    items: tuple[Service, ...]

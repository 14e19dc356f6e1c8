"""Projects a services document onto a metric registry."""

from __future__ import annotations

import logging

from cloudera_exporter.health.models import HealthDocument, HealthSummary
from cloudera_exporter.metrics.registry import MetricRegistry

logger = logging.getLogger(__name__)


def health_value(summary: str) -> float:
    """1.0 for GOOD, 0.0 for every other summary, known or not."""
    return 1.0 if summary == HealthSummary.GOOD.value else 0.0


def project(
    document: HealthDocument,
    registry: MetricRegistry,
    include_checks: bool = False,
) -> int:
    """Write one value per service name in *document* into *registry*.

    Names are validated up front, so a static registry that rejects a name
    raises UnknownServiceError before any gauge is touched. Repeated names
    keep their first occurrence. Returns the number of services written.
    """
    registry.check_names(service.name for service in document.items)

    seen: set[str] = set()
    for service in document.items:
        if service.name in seen:
            logger.warning("Duplicate service %r in document, ignoring repeat", service.name)
            continue
        seen.add(service.name)
        registry.set(service.name, health_value(service.health_summary))
        if include_checks:
            for check in service.health_checks:
                registry.set_check(service.name, check.name.lower(), health_value(check.summary))
    return len(seen)

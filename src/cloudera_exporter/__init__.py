"""Prometheus exporter for Cloudera Manager service health."""

__version__ = "0.1.0"

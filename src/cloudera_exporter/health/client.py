"""Async client for the Cloudera Manager services endpoint."""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from cloudera_exporter.config.models import ClouderaConfig
from cloudera_exporter.errors import AuthError, ConnectError, DecodeError
from cloudera_exporter.health.models import HealthDocument

logger = logging.getLogger(__name__)

_ESCAPE_PATTERN = re.compile(r"%[0-9A-Fa-f]{2}")


def services_url(uri: str, cluster_name: str) -> str:
    """Build the services URL for *cluster_name*.

    Names that already contain percent escapes (``Cluster%201``) are used as-is.
    """
    if _ESCAPE_PATTERN.search(cluster_name):
        path_name = cluster_name
    else:
        path_name = quote(cluster_name, safe="")
    return f"{uri.rstrip('/')}/api/v1/clusters/{path_name}/services/"


async def fetch_services(
    config: ClouderaConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HealthDocument:
    """Fetch and decode the services document for the configured cluster.

    Raises AuthError on 401/403, ConnectError on any other transport failure,
    timeout or non-2xx status, and DecodeError when the body is not a valid
    services document. Never retries.
    """
    url = services_url(config.uri, config.cluster_name)
    try:
        async with httpx.AsyncClient(
            timeout=config.timeout,
            auth=(config.user, config.password),
            transport=transport,
        ) as client:
            resp = await client.get(url)
    except httpx.TimeoutException as exc:
        raise ConnectError(f"Timed out after {config.timeout}s", url) from exc
    except httpx.HTTPError as exc:
        raise ConnectError(f"Request failed: {exc}", url) from exc

    if resp.status_code in (401, 403):
        raise AuthError("Credentials rejected", url, resp.status_code)
    if not resp.is_success:
        raise ConnectError("Unexpected response", url, resp.status_code)

    try:
        payload = resp.json()
    except ValueError as exc:
        raise DecodeError(f"Response is not JSON: {exc}", url) from exc
    try:
        document = HealthDocument.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"Unexpected document shape: {exc}", url) from exc

    logger.debug("Fetched %d services from %s", len(document.items), url)
    return document

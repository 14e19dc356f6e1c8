"""Landing page and exporter status endpoints."""

from __future__ import annotations

import platform
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from cloudera_exporter import __version__

router = APIRouter(tags=["meta"])

LANDING_PAGE = """<html>
<head><title>Cloudera Exporter</title></head>
<body>
<h1>Cloudera Exporter</h1>
<p><a href='{metrics_path}'>Metrics</a></p>
<h2>Build</h2>
<pre>version={version} python={python_version}</pre>
</body>
</html>"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def landing(request: Request) -> str:
    return LANDING_PAGE.format(
        metrics_path=request.app.state.config.web.telemetry_path,
        version=__version__,
        python_version=platform.python_version(),
    )


@router.get("/health")
async def healthcheck(request: Request) -> Dict[str, Any]:
    scheduler = request.app.state.scheduler
    registry = request.app.state.registry
    body: Dict[str, Any] = {
        "status": "ok",
        "mode": registry.mode.value,
        "services": registry.snapshot(),
    }
    if scheduler is not None:
        body["cycles"] = scheduler.cycles
        body["last_error"] = scheduler.last_error
        body["last_success"] = scheduler.last_success
    return body

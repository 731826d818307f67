"""Home, health, metrics and configuration endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["health"])

HOME_PAGE = """<!DOCTYPE html>
<html>
<head><title>{title}</title></head>
<body>
<h1>{title} {version}</h1>
<ul>
<li><a href="/config">Configuration</a></li>
<li><a href="/metrics">Metrics</a></li>
<li><a href="/health">Health</a></li>
<li><a href="/docs">API docs</a></li>
</ul>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home(request: Request) -> str:
    return HOME_PAGE.format(title=request.app.title, version=request.app.version)


@router.get("/health", summary="Health probe")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/healthz", summary="Health probe", include_in_schema=False)
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/metrics", summary="Prometheus metrics")
async def metrics(request: Request) -> Response:
    sink = request.app.state.container.metrics
    exposition = getattr(sink, "exposition", None)
    if exposition is None:
        return Response(content=b"", media_type="text/plain")
    body, content_type = exposition()
    return Response(content=body, media_type=content_type)


@router.get("/config", summary="Loaded receivers with secrets masked")
async def config(request: Request) -> Dict[str, Any]:
    return request.app.state.container.policies.describe()

"""Operational endpoints: liveness, version label, Prometheus scrape.

/health answers from the process alone and never touches the user store,
so it stays 200 whatever state the repository is in.  /version reports
which architecture this deployment was built as; the label is fixed at
startup by the ARCHITECTURE setting.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from userapi.api.dependencies import get_settings
from userapi.core.config import Settings

router = APIRouter(tags=["system"])


class HealthOut(BaseModel):
    status: str


class VersionOut(BaseModel):
    version: str


@router.get("/health", response_model=HealthOut)
async def health() -> HealthOut:
    return HealthOut(status="healthy")


@router.get("/version", response_model=VersionOut)
async def version(settings: Annotated[Settings, Depends(get_settings)]) -> VersionOut:
    return VersionOut(version=settings.architecture)


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus text exposition format (not JSON)."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

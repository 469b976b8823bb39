# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src import __version__
from src.api.dependencies import get_http_client
from src.core.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class ComponentsHealth(BaseModel):
    """All components health status."""
    record_store: ComponentHealth | None = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    components: ComponentsHealth = Field(default_factory=ComponentsHealth)


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")
    checks: dict[str, Any] = Field(description="Individual check results")


async def check_record_store(http: httpx.AsyncClient) -> ComponentHealth:
    """Check that the PocketBase server answers its health endpoint."""
    start = time.time()
    try:
        response = await http.get("/api/health", timeout=5.0)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Record store health check failed: %s", e)
        return ComponentHealth(status="unhealthy", message=str(e))

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


HttpClient = Annotated[httpx.AsyncClient, Depends(get_http_client)]


@router.get("/health", response_model=HealthResponse)
async def health_check(http: HttpClient) -> HealthResponse:
    """Check if the API is healthy and the record store reachable.

    The API itself is up whenever this answers; an unreachable record store
    reports "degraded".
    """
    settings = get_settings()
    store_health = await check_record_store(http)

    return HealthResponse(
        status="healthy" if store_health.status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        components=ComponentsHealth(record_store=store_health),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(http: HttpClient) -> ReadinessResponse:
    """Check if the API is ready to accept traffic."""
    store_health = await check_record_store(http)
    checks = {
        "record_store": {
            "status": store_health.status,
            "latency_ms": store_health.latency_ms,
        }
    }
    return ReadinessResponse(ready=store_health.status == "healthy", checks=checks)

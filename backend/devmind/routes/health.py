"""
DevMind Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Reports registry state only. It deliberately does NOT call any vendor:
       probes every 10-30 seconds would burn quota and make our health
       depend on a third party's latency.

Status levels:
    - healthy:   a provider is active; AI requests can be served
    - degraded:  process is up but no provider is active (AI requests → 503)
"""

import logging
import time

from fastapi import APIRouter, Depends

from devmind import __version__
from devmind.dependencies import get_registry
from devmind.providers.registry import ProviderRegistry
from devmind.schemas.ai import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(
    registry: ProviderRegistry = Depends(get_registry),
) -> HealthResponse:
    active = registry.active_vendor()
    return HealthResponse(
        status="healthy" if active else "degraded",
        version=__version__,
        active_provider=active.value if active else None,
        registered_providers=sorted(v.value for v in registry.list_registered()),
        uptime_seconds=round(time.time() - _start_time, 2),
    )

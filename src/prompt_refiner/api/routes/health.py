"""
Health check endpoint for monitoring.
"""

import time
from fastapi import APIRouter, Depends

from ...models.api_models import HealthResponse
from ...orchestration.orchestrator import PromptOrchestrator
from ...version import API_VERSION
from ..dependencies import get_orchestrator

router = APIRouter()

# Track start time for uptime calculation
_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(orchestrator: PromptOrchestrator = Depends(get_orchestrator)) -> HealthResponse:
    """
    Health check endpoint for monitoring.

    The service is "healthy" when every attached collaborator answers its
    ping and "degraded" otherwise; refinement keeps working either way.

    Returns:
        Health status, uptime and collaborator availability
    """
    status = await orchestrator.health()
    cache_ok = status["cache"] or orchestrator.cache is None
    store_ok = status["store"] or orchestrator.store is None

    return HealthResponse(
        status="healthy" if cache_ok and store_ok else "degraded",
        version=API_VERSION,
        uptime_seconds=time.time() - _start_time,
        cache_available=status["cache"],
        store_available=status["store"],
    )

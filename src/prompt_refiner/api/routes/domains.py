"""
Domain listing endpoint.

GET /api/v1/domains - rule statistics and quality weights per domain
"""

from fastapi import APIRouter, Depends

from ...models.api_models import DomainInfo, DomainsResponse
from ...orchestration.orchestrator import PromptOrchestrator
from ..dependencies import get_orchestrator

router = APIRouter()


@router.get("/domains", response_model=DomainsResponse)
async def list_domains(orchestrator: PromptOrchestrator = Depends(get_orchestrator)) -> DomainsResponse:
    """
    List the domains with dedicated rule sets.

    Returns:
        Per-domain rule counts and quality weights
    """
    engine = orchestrator.engine
    stats = engine.statistics()
    return DomainsResponse(
        domains=[DomainInfo(domain=domain, **info) for domain, info in stats.items()],
        weights={domain: engine.quality_weights(domain) for domain in stats},
    )

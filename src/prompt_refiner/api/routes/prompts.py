"""
Prompt API routes.

- POST /api/v1/prompts/process  - Refine a prompt
- POST /api/v1/prompts/evaluate - Score a prompt without refining it
- POST /api/v1/prompts/compare  - Compare prompt variants
- POST /api/v1/prompts          - Refine and save a prompt
- GET  /api/v1/prompts/search   - Search saved prompts
- GET  /api/v1/prompts/stats    - Store statistics
- GET  /api/v1/prompts/{id}     - Fetch a saved prompt
"""

from typing import List, Literal, Optional

import structlog
from fastapi import APIRouter, Depends, Query, status

from ...models.api_models import CompareRequest, EvaluateRequest, SaveRequest
from ...models.enums import PromptDomain
from ...models.process import ComparisonResult, EvaluationResult, ProcessInput, ProcessResult
from ...models.store import SavedPrompt, SearchPage, SearchParams, StoreStats
from ...orchestration.orchestrator import PromptOrchestrator
from ..dependencies import get_orchestrator, to_http_exception

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/prompts", tags=["Prompts"])


# ============================================================================
# PIPELINE ENDPOINTS
# ============================================================================

@router.post("/process", response_model=ProcessResult, status_code=status.HTTP_200_OK)
async def process_prompt(
    request: ProcessInput,
    orchestrator: PromptOrchestrator = Depends(get_orchestrator),
) -> ProcessResult:
    """
    Refine a prompt: analyze, apply domain rules, validate and score.

    Args:
        request: Raw prompt with optional domain, tone, context and variables

    Returns:
        ProcessResult with refined prompt, system prompt and quality score

    Raises:
        HTTPException: 422 on invalid input, 504 on timeout, 500 otherwise
    """
    logger.info(
        "process_request_received",
        domain=request.domain.value if request.domain else None,
        raw_length=len(request.raw),
    )

    try:
        result = await orchestrator.process(request)
    except Exception as e:
        raise to_http_exception(e, "process") from e

    logger.info(
        "process_request_completed",
        domain=result.metadata.domain.value,
        overall_score=result.score.overall,
        cache_hit=result.metadata.cache_hit,
    )
    return result


@router.post("/evaluate", response_model=EvaluationResult)
async def evaluate_prompt(
    request: EvaluateRequest,
    orchestrator: PromptOrchestrator = Depends(get_orchestrator),
) -> EvaluationResult:
    """
    Evaluate a prompt without refining it.

    Returns:
        EvaluationResult with score, validation and recommendations
    """
    try:
        return await orchestrator.evaluate(request.prompt, request.criteria, request.domain)
    except Exception as e:
        raise to_http_exception(e, "evaluate") from e


@router.post("/compare", response_model=ComparisonResult)
async def compare_prompts(
    request: CompareRequest,
    orchestrator: PromptOrchestrator = Depends(get_orchestrator),
) -> ComparisonResult:
    """
    Compare two or more prompt variants.

    Returns:
        ComparisonResult naming the winning variant

    Raises:
        HTTPException: 422 when fewer than two variants are given
    """
    try:
        return await orchestrator.compare(request.prompts, request.test_input, request.domain)
    except Exception as e:
        raise to_http_exception(e, "compare") from e


# ============================================================================
# STORE ENDPOINTS
# ============================================================================

@router.post("", response_model=SavedPrompt, status_code=status.HTTP_201_CREATED)
async def save_prompt(
    request: SaveRequest,
    orchestrator: PromptOrchestrator = Depends(get_orchestrator),
) -> SavedPrompt:
    """
    Refine a prompt and save the result.

    Raises:
        HTTPException: 503 when the store is unavailable
    """
    try:
        return await orchestrator.save(request.input, request.metadata)
    except Exception as e:
        raise to_http_exception(e, "save") from e


@router.get("/search", response_model=SearchPage)
async def search_prompts(
    query: Optional[str] = Query(default=None, description="Free-text query"),
    domain: Optional[PromptDomain] = Query(default=None),
    tags: List[str] = Query(default=[]),
    min_score: Optional[float] = Query(default=None, ge=0.0, le=1.0),
    sort_by: Literal["score", "created", "updated", "usage"] = Query(default="score"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    orchestrator: PromptOrchestrator = Depends(get_orchestrator),
) -> SearchPage:
    """
    Search saved prompts.

    Returns:
        One page of results with relevance and the total match count
    """
    params = SearchParams(
        query=query,
        domain=domain,
        tags=tags,
        min_score=min_score,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    try:
        return await orchestrator.search(params)
    except Exception as e:
        raise to_http_exception(e, "search") from e


@router.get("/stats", response_model=StoreStats)
async def prompt_stats(orchestrator: PromptOrchestrator = Depends(get_orchestrator)) -> StoreStats:
    """Aggregate statistics of the prompt store."""
    try:
        return await orchestrator.stats()
    except Exception as e:
        raise to_http_exception(e, "stats") from e


@router.get("/{prompt_id}", response_model=SavedPrompt)
async def get_prompt(
    prompt_id: str,
    orchestrator: PromptOrchestrator = Depends(get_orchestrator),
) -> SavedPrompt:
    """
    Fetch a saved prompt by id.

    Raises:
        HTTPException: 404 when the id is unknown
    """
    try:
        return await orchestrator.get(prompt_id)
    except Exception as e:
        raise to_http_exception(e, "get") from e

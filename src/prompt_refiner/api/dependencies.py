"""
Request dependencies and exception mapping shared by the routes.
"""

from fastapi import HTTPException, Request, status
import structlog

from ..exceptions import InputError, NotFoundError, PipelineTimeoutError, StoreError
from ..orchestration.orchestrator import PromptOrchestrator

logger = structlog.get_logger(__name__)


def get_orchestrator(request: Request) -> PromptOrchestrator:
    """Orchestrator built by the application lifespan."""
    return request.app.state.orchestrator


def to_http_exception(error: Exception, operation: str) -> HTTPException:
    """
    Map a pipeline exception to an HTTP error.

    InputError/ValueError -> 422, NotFoundError -> 404,
    PipelineTimeoutError -> 504, StoreError -> 503, anything else -> 500.
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))

    if isinstance(error, PipelineTimeoutError):
        logger.warning(f"{operation}_timeout", error=str(error))
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(error))

    if isinstance(error, StoreError):
        logger.error(f"{operation}_store_error", error=str(error))
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Prompt store unavailable: {error}",
        )

    if isinstance(error, (InputError, ValueError)):
        logger.warning(f"{operation}_validation_error", error=str(error))
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Validation error: {error}",
        )

    logger.error(f"{operation}_failed", error=str(error), exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{operation.capitalize()} failed: {error}",
    )

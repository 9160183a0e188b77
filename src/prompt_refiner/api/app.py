"""
FastAPI application for the prompt refinement service.

This is the main application that wires the orchestrator, endpoints and middleware.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from ..version import API_VERSION
from ..config import settings
from ..logging_config import setup_logging
from ..orchestration.orchestrator import PromptOrchestrator, build_orchestrator
from .routes import health, version, prompts, domains
from .middleware import (
    setup_logging_middleware,
    setup_error_handling_middleware,
    setup_metrics_middleware,
)

# Setup logging on module import
setup_logging()
logger = structlog.get_logger(__name__)


def create_app(orchestrator: Optional[PromptOrchestrator] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        orchestrator: Pre-built orchestrator (tests inject one); when omitted
            the lifespan builds the default one and closes it on shutdown

    Returns:
        Configured FastAPI app instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Handles startup and shutdown events.
        """
        owned = orchestrator is None
        app.state.orchestrator = build_orchestrator() if owned else orchestrator
        logger.info(
            "api_starting",
            version=API_VERSION,
            log_level=settings.log_level,
            cache_enabled=settings.cache_enabled,
            spacy_enabled=settings.analyzer_use_spacy,
        )
        yield
        if owned:
            await app.state.orchestrator.close()
        logger.info("api_shutting_down")

    app = FastAPI(
        title="Prompt Refiner",
        description="Deterministic prompt analysis, domain rule refinement, validation and quality scoring",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    if orchestrator is not None:
        app.state.orchestrator = orchestrator

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom middleware (order matters - last added = outermost)
    if settings.enable_metrics:
        setup_metrics_middleware(app)
    setup_logging_middleware(app)
    setup_error_handling_middleware(app)

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(version.router, prefix="/api/v1", tags=["Version"])
    app.include_router(domains.router, prefix="/api/v1", tags=["Domains"])
    app.include_router(prompts.router)

    return app


# Create app instance
app = create_app()


def main() -> None:
    """
    Entry point for running the API server directly.

    For development use. In production, use uvicorn directly.
    """
    import uvicorn

    uvicorn.run(
        "prompt_refiner.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

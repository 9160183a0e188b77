"""
FastAPI middleware for logging, metrics, and error handling.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


def setup_logging_middleware(app: FastAPI) -> None:
    """
    Setup request/response logging middleware.

    Logs all requests with:
    - Request method, path, query params
    - Response status code
    - Processing time

    A request id is bound to the structlog context for the duration of
    the request and returned in the X-Request-ID header.
    """

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            query_params=str(request.query_params),
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            process_time = time.time() - start_time
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                process_time_ms=round(process_time * 1000, 2),
            )

            response.headers["X-Process-Time"] = str(process_time)
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                process_time_ms=round(process_time * 1000, 2),
                error=str(e),
                exc_info=True,
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id")


def setup_error_handling_middleware(app: FastAPI) -> None:
    """
    Setup global error handling middleware.

    Catches unhandled exceptions and returns consistent error responses.
    """

    @app.middleware("http")
    async def handle_errors(request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "unhandled_exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Internal server error",
                    "detail": str(e) if app.debug else "An unexpected error occurred",
                },
            )


def setup_metrics_middleware(app: FastAPI) -> None:
    """
    Setup request metrics middleware.

    Reports request duration per endpoint to the orchestrator's telemetry
    when one is attached to app.state.
    """

    @app.middleware("http")
    async def collect_metrics(request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        orchestrator = getattr(request.app.state, "orchestrator", None)
        telemetry = getattr(orchestrator, "telemetry", None)
        if telemetry is not None:
            telemetry.metric(
                "http_request_duration_seconds",
                process_time,
                "histogram",
                {
                    "endpoint": request.url.path,
                    "method": request.method,
                    "status_code": str(response.status_code),
                },
            )

        logger.debug(
            "request_metrics",
            endpoint=request.url.path,
            method=request.method,
            status_code=response.status_code,
            duration_seconds=process_time,
        )
        return response

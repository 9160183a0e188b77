"""
Structured logging configuration using structlog.

Both the HTTP service and the CLI call setup_logging() once at startup. Every
event carries the rules and fingerprint versions, so a logged refinement or
cache key can be matched to the heuristics that produced it.
"""

import logging
from typing import Any, Dict, Optional

import structlog

from .config import settings
from .version import FINGERPRINT_VERSION, RULES_VERSION


def add_pipeline_versions(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor stamping rules_version and fingerprint_version; explicit values win."""
    event_dict.setdefault("rules_version", RULES_VERSION)
    event_dict.setdefault("fingerprint_version", FINGERPRINT_VERSION)
    return event_dict


def setup_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog for the service or the CLI.

    Args:
        level: Level override (defaults to settings.log_level)
        json_output: Renderer override (defaults to settings.log_json)
    """
    use_json = settings.log_json if json_output is None else json_output
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            add_pipeline_versions,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName((level or settings.log_level).upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a module name (usually __name__)."""
    return structlog.get_logger(name)

"""
Collaborator services: cache, prompt store and telemetry.
"""

from .database import Database, create_db_engine
from .memory_cache import InMemoryCache
from .protocols import CacheBackend, PromptStore, Telemetry
from .sql_store import SqlPromptStore, compute_relevance, quality_bucket
from .telemetry import StructlogTelemetry

__all__ = [
    "Database",
    "create_db_engine",
    "InMemoryCache",
    "CacheBackend",
    "PromptStore",
    "Telemetry",
    "SqlPromptStore",
    "compute_relevance",
    "quality_bucket",
    "StructlogTelemetry",
]

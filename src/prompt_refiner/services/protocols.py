"""
Collaborator interfaces injected into the orchestrator.

Implementations live next to this module (memory_cache, sql_store,
telemetry); tests substitute their own fakes.
"""

from typing import Any, Dict, Optional, Protocol

from ..models.scoring import QualityScore
from ..models.store import SavedPrompt, SaveMetadata, SearchPage, SearchParams, StoreStats


class CacheBackend(Protocol):
    """Protocol for result caches.

    get() returns None on a miss and never raises for a missing key.
    """

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ...

    async def ping(self) -> bool:
        ...

    async def disconnect(self) -> None:
        ...


class PromptStore(Protocol):
    """Protocol for prompt persistence."""

    async def save(
        self,
        refined: str,
        original: str,
        metadata: SaveMetadata,
        score: QualityScore,
        system_prompt: Optional[str] = None,
    ) -> SavedPrompt:
        ...

    async def search(self, params: SearchParams) -> SearchPage:
        ...

    async def get_by_id(self, prompt_id: str) -> Optional[SavedPrompt]:
        ...

    async def get_stats(self) -> StoreStats:
        ...

    async def ping(self) -> bool:
        ...


class Telemetry(Protocol):
    """Protocol for fire-and-forget observability calls."""

    def track(self, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        ...

    def error(self, name: str, err: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
        ...

    def metric(
        self,
        name: str,
        value: float,
        metric_type: str = "counter",
        labels: Optional[Dict[str, str]] = None,
    ) -> None:
        ...

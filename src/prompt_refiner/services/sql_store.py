"""
SQLAlchemy implementation of the prompt store.

Blocking database work runs in worker threads (asyncio.to_thread) so the
async orchestrator never blocks its event loop. SQLAlchemy errors are
wrapped in StoreError.
"""

import asyncio
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..exceptions import NotFoundError, StoreError
from ..models.scoring import QualityScore
from ..models.store import (
    SavedPrompt,
    SaveMetadata,
    SearchPage,
    SearchParams,
    SearchResult,
    StoreStats,
)
from .database import Database
from .orm import PromptRecord

logger = structlog.get_logger(__name__)

SORT_COLUMNS = {
    "score": PromptRecord.overall,
    "created": PromptRecord.created_at,
    "updated": PromptRecord.updated_at,
    "usage": PromptRecord.usage_count,
}

UPDATABLE_FIELDS = ("name", "description", "tags", "is_public", "system_prompt")


def _to_model(record: PromptRecord) -> SavedPrompt:
    return SavedPrompt(
        id=record.id,
        name=record.name,
        prompt=record.prompt,
        original=record.original,
        system_prompt=record.system_prompt,
        domain=record.domain,
        description=record.description,
        tags=list(record.tags or []),
        score=QualityScore(
            clarity=record.clarity,
            specificity=record.specificity,
            structure=record.structure,
            completeness=record.completeness,
            overall=record.overall,
        ),
        created_at=record.created_at,
        updated_at=record.updated_at,
        usage_count=record.usage_count or 0,
        metadata=dict(record.extra or {}),
    )


def quality_bucket(overall: float) -> str:
    """excellent >= 0.9, good >= 0.7, average >= 0.5, else poor."""
    if overall >= 0.9:
        return "excellent"
    if overall >= 0.7:
        return "good"
    if overall >= 0.5:
        return "average"
    return "poor"


def compute_relevance(record: PromptRecord, params: SearchParams) -> float:
    """
    Relevance of a record for a search.

    base + overall * quality_weight + min(query term matches * query_weight,
    query_cap) + matching tag ratio * tag_weight, capped at 1.0.
    """
    relevance = settings.store_relevance_base + record.overall * settings.store_relevance_quality_weight

    if params.query:
        haystack = " ".join(filter(None, [record.name, record.description, record.prompt])).lower()
        matches = sum(1 for term in params.query.lower().split() if term in haystack)
        relevance += min(matches * settings.store_relevance_query_weight, settings.store_relevance_query_cap)

    if params.tags:
        record_tags = {t.lower() for t in (record.tags or [])}
        matching = sum(1 for t in params.tags if t.lower() in record_tags)
        relevance += matching / len(params.tags) * settings.store_relevance_tag_weight

    return min(1.0, relevance)


def _matches(record: PromptRecord, params: SearchParams) -> bool:
    if params.query:
        haystack = " ".join(filter(None, [record.name, record.description, record.prompt])).lower()
        if not any(term in haystack for term in params.query.lower().split()):
            return False
    if params.tags:
        record_tags = {t.lower() for t in (record.tags or [])}
        if not any(t.lower() in record_tags for t in params.tags):
            return False
    return True


class SqlPromptStore:
    """Prompt store backed by a relational database."""

    def __init__(self, database: Optional[Database] = None, create_tables: bool = True):
        """
        Args:
            database: Database to use (default: settings.store_db_url)
            create_tables: Create missing tables on construction
        """
        self.database = database or Database()
        if create_tables:
            self.database.create_all_tables()
        self.logger = logger.bind(component="sql_store")

    async def _run(self, operation: str, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except SQLAlchemyError as e:
            self.logger.error("store_operation_failed", operation=operation, error=str(e))
            raise StoreError(f"Store {operation} failed: {e}") from e

    # ------------------------------------------------------------------
    # Save / get / update / delete
    # ------------------------------------------------------------------

    async def save(
        self,
        refined: str,
        original: str,
        metadata: SaveMetadata,
        score: QualityScore,
        system_prompt: Optional[str] = None,
    ) -> SavedPrompt:
        saved = await self._run("save", self._save_sync, refined, original, metadata, score, system_prompt)
        self.logger.info("prompt_saved", prompt_id=saved.id, domain=saved.domain.value)
        return saved

    def _save_sync(
        self,
        refined: str,
        original: str,
        metadata: SaveMetadata,
        score: QualityScore,
        system_prompt: Optional[str],
    ) -> SavedPrompt:
        with self.database.session() as session:
            record = PromptRecord(
                id=str(uuid.uuid4()),
                name=metadata.name,
                prompt=refined,
                original=original,
                system_prompt=system_prompt,
                domain=metadata.domain.value,
                description=metadata.description,
                tags=list(metadata.tags),
                is_public=metadata.is_public,
                author_id=metadata.author_id,
                usage_count=0,
                extra={"is_public": metadata.is_public, "author_id": metadata.author_id},
                **score.model_dump(),
            )
            session.add(record)
            session.flush()
            return _to_model(record)

    async def get_by_id(self, prompt_id: str) -> Optional[SavedPrompt]:
        return await self._run("get", self._get_sync, prompt_id)

    def _get_sync(self, prompt_id: str) -> Optional[SavedPrompt]:
        with self.database.session() as session:
            record = session.get(PromptRecord, prompt_id)
            return _to_model(record) if record is not None else None

    async def update(self, prompt_id: str, changes: Dict[str, Any]) -> SavedPrompt:
        """
        Update name, description, tags, visibility or system prompt.

        Raises:
            NotFoundError: If the id does not exist
        """
        return await self._run("update", self._update_sync, prompt_id, changes)

    def _update_sync(self, prompt_id: str, changes: Dict[str, Any]) -> SavedPrompt:
        with self.database.session() as session:
            record = session.get(PromptRecord, prompt_id)
            if record is None:
                raise NotFoundError(f"Prompt not found: {prompt_id}")
            for field_name, value in changes.items():
                if field_name in UPDATABLE_FIELDS:
                    setattr(record, field_name, value)
            record.updated_at = datetime.now(timezone.utc)
            session.flush()
            return _to_model(record)

    async def delete(self, prompt_id: str) -> bool:
        return await self._run("delete", self._delete_sync, prompt_id)

    def _delete_sync(self, prompt_id: str) -> bool:
        with self.database.session() as session:
            record = session.get(PromptRecord, prompt_id)
            if record is None:
                return False
            session.delete(record)
            return True

    # ------------------------------------------------------------------
    # Search / stats
    # ------------------------------------------------------------------

    async def search(self, params: SearchParams) -> SearchPage:
        return await self._run("search", self._search_sync, params)

    def _search_sync(self, params: SearchParams) -> SearchPage:
        with self.database.session() as session:
            stmt = select(PromptRecord)
            if params.domain is not None:
                stmt = stmt.where(PromptRecord.domain == params.domain.value)
            if params.min_score is not None:
                stmt = stmt.where(PromptRecord.overall >= params.min_score)

            column = SORT_COLUMNS[params.sort_by]
            stmt = stmt.order_by(column.desc() if params.sort_order == "desc" else column.asc(), PromptRecord.id)

            records = [r for r in session.scalars(stmt) if _matches(r, params)]
            page = records[params.offset: params.offset + params.limit]
            results = [
                SearchResult(prompt=_to_model(r), relevance=compute_relevance(r, params))
                for r in page
            ]
            return SearchPage(results=results, total=len(records))

    async def get_stats(self) -> StoreStats:
        return await self._run("stats", self._stats_sync)

    def _stats_sync(self) -> StoreStats:
        with self.database.session() as session:
            records: List[PromptRecord] = list(session.scalars(select(PromptRecord)))

        if not records:
            return StoreStats()

        buckets = {"excellent": 0, "good": 0, "average": 0, "poor": 0}
        for record in records:
            buckets[quality_bucket(record.overall)] += 1

        return StoreStats(
            total_prompts=len(records),
            average_score=sum(r.overall for r in records) / len(records),
            domain_distribution=dict(Counter(r.domain for r in records)),
            tag_distribution=dict(Counter(tag for r in records for tag in (r.tags or []))),
            quality_distribution=buckets,
        )

    async def ping(self) -> bool:
        try:
            return await asyncio.to_thread(self.database.ping)
        except SQLAlchemyError as e:
            self.logger.warning("store_ping_failed", error=str(e))
            return False

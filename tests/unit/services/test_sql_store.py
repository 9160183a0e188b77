"""
Unit tests for the SQLAlchemy prompt store (in-memory SQLite).
"""

import pytest

from prompt_refiner.exceptions import NotFoundError
from prompt_refiner.models.enums import PromptDomain
from prompt_refiner.models.scoring import QualityScore
from prompt_refiner.models.store import SaveMetadata, SearchParams
from prompt_refiner.services import quality_bucket


def _score(overall):
    return QualityScore(
        clarity=overall, specificity=overall, structure=overall, completeness=overall, overall=overall,
    )


async def _seed(store):
    await store.save(
        "Optimize the SQL query for performance.", "make query fast",
        SaveMetadata(name="Fast query", domain=PromptDomain.SQL, tags=["sql", "performance"]),
        _score(0.92),
    )
    await store.save(
        "Design a database table for users.", "create a table for users",
        SaveMetadata(name="Users table", domain=PromptDomain.SQL, tags=["sql"]),
        _score(0.75),
    )
    await store.save(
        "Create a brand identity for a coffee shop.", "hazme un logo bonito",
        SaveMetadata(name="Coffee brand", domain=PromptDomain.BRANDING, tags=["logo"], description="Logo brief"),
        _score(0.4),
    )


@pytest.mark.unit
class TestQualityBucket:
    """Test score buckets."""

    @pytest.mark.parametrize("overall,bucket", [
        (0.95, "excellent"),
        (0.9, "excellent"),
        (0.7, "good"),
        (0.55, "average"),
        (0.2, "poor"),
    ])
    def test_bucket(self, overall, bucket):
        assert quality_bucket(overall) == bucket


@pytest.mark.unit
@pytest.mark.asyncio
class TestSqlPromptStore:
    """Test save, get, search and stats."""

    async def test_save_and_get(self, store):
        saved = await store.save(
            "Optimize the SQL query.", "make query fast",
            SaveMetadata(name="Fast query", domain=PromptDomain.SQL, tags=["sql"]),
            _score(0.8),
            system_prompt="You are a DBA.",
        )

        fetched = await store.get_by_id(saved.id)

        assert fetched is not None
        assert fetched.prompt == "Optimize the SQL query."
        assert fetched.original == "make query fast"
        assert fetched.system_prompt == "You are a DBA."
        assert fetched.domain == PromptDomain.SQL
        assert fetched.score.overall == 0.8
        assert fetched.usage_count == 0

    async def test_get_unknown(self, store):
        assert await store.get_by_id("does-not-exist") is None

    async def test_search_by_domain_sorted_by_score(self, store):
        await _seed(store)

        page = await store.search(SearchParams(domain=PromptDomain.SQL))

        assert page.total == 2
        assert [r.prompt.name for r in page.results] == ["Fast query", "Users table"]

    async def test_search_min_score_and_paging(self, store):
        await _seed(store)

        page = await store.search(SearchParams(min_score=0.5, limit=1, offset=1))

        assert page.total == 2
        assert len(page.results) == 1
        assert page.results[0].prompt.name == "Users table"

    async def test_search_query_and_tags(self, store):
        await _seed(store)

        by_query = await store.search(SearchParams(query="logo"))
        by_tag = await store.search(SearchParams(tags=["performance"]))

        assert [r.prompt.name for r in by_query.results] == ["Coffee brand"]
        assert [r.prompt.name for r in by_tag.results] == ["Fast query"]

    async def test_relevance_bounded(self, store):
        await _seed(store)

        page = await store.search(SearchParams(query="sql query performance", tags=["sql", "performance"]))

        assert page.results
        assert all(0.0 <= r.relevance <= 1.0 for r in page.results)
        assert page.results[0].relevance == 1.0

    async def test_update_and_delete(self, store):
        saved = await store.save(
            "Text.", "text", SaveMetadata(name="Old"), _score(0.6),
        )

        updated = await store.update(saved.id, {"name": "New", "tags": ["x"], "prompt": "ignored"})

        assert updated.name == "New"
        assert updated.tags == ["x"]
        assert updated.prompt == "Text."
        assert await store.delete(saved.id) is True
        assert await store.get_by_id(saved.id) is None

    async def test_update_unknown(self, store):
        with pytest.raises(NotFoundError):
            await store.update("nope", {"name": "x"})

    async def test_stats(self, store):
        await _seed(store)

        stats = await store.get_stats()

        assert stats.total_prompts == 3
        assert stats.average_score == pytest.approx((0.92 + 0.75 + 0.4) / 3)
        assert stats.domain_distribution == {"sql": 2, "branding": 1}
        assert stats.tag_distribution["sql"] == 2
        assert stats.quality_distribution == {"excellent": 1, "good": 1, "average": 0, "poor": 1}

    async def test_empty_stats(self, store):
        stats = await store.get_stats()

        assert stats.total_prompts == 0
        assert stats.average_score == 0.0

    async def test_ping(self, store):
        assert await store.ping() is True

"""
Unit tests for the pipeline orchestrator.
"""

import asyncio
import time
from unittest.mock import patch

import pytest

from prompt_refiner.exceptions import (
    InputError,
    NotFoundError,
    PipelineTimeoutError,
    RuleEngineError,
    StoreError,
)
from prompt_refiner.models.enums import IssueKind, IssueSeverity, PromptDomain, RuleCategory
from prompt_refiner.models.process import ProcessInput
from prompt_refiner.models.refinement import AppliedRule, RefinementResult
from prompt_refiner.models.scoring import QualityScore
from prompt_refiner.models.store import SaveMetadata, SearchParams
from prompt_refiner.models.validation import QualityMetrics, ValidationIssue, ValidationResult, ValidationSuggestion
from prompt_refiner.orchestration import (
    PromptOrchestrator,
    build_recommendations,
    cache_ttl,
    compile_suggestions,
)
from prompt_refiner.services import InMemoryCache


REFINED_SQL = (
    "Optimize the SQL query for performance. Review the execution plan first, "
    "then add indexes on filtered columns and return the expected response time."
)


def _score(value):
    return QualityScore(clarity=value, specificity=value, structure=value, completeness=value, overall=value)


def _validation(errors=(), suggestions=()):
    return ValidationResult(
        is_valid=not errors,
        errors=list(errors),
        suggestions=list(suggestions),
        quality_metrics=QualityMetrics.zero(),
    )


@pytest.mark.unit
class TestHelpers:
    """Test module-level helpers."""

    @pytest.mark.parametrize("overall,expected", [(1.0, 3600), (0.8, 2880), (0.5, 1800), (0.2, 1800)])
    def test_cache_ttl(self, overall, expected):
        assert cache_ttl(_score(overall), base_ttl=3600) == expected

    def test_compile_suggestions_order_and_limit(self):
        refinement = RefinementResult(
            refined="x",
            rules_applied=[
                AppliedRule(rule_id="r1", description="Replace vague wording", category=RuleCategory.VAGUE_TERMS,
                            impact="high"),
                AppliedRule(rule_id="r2", description="Add period", category=RuleCategory.FORMATTING, impact="low"),
            ],
        )
        validation = _validation(suggestions=[
            ValidationSuggestion(kind=IssueKind.CLARITY, message="Replace vague wording"),
            ValidationSuggestion(kind=IssueKind.TEMPLATE, message="Use variables"),
        ])

        suggestions = compile_suggestions(refinement, validation, _score(0.5), limit=3)

        assert suggestions == [
            "Replace vague wording",
            "Use variables",
            "Consider adding more specific details and reducing vague terms",
        ]

    def test_compile_suggestions_good_score(self):
        suggestions = compile_suggestions(RefinementResult(refined="x"), _validation(), _score(0.9))

        assert suggestions == []

    def test_build_recommendations(self):
        validation = _validation(
            errors=[
                ValidationIssue(code="OFFENSIVE_CONTENT", kind=IssueKind.CONTENT, message="Offensive",
                                severity=IssueSeverity.CRITICAL),
                ValidationIssue(code="PROMPT_TOO_LONG", kind=IssueKind.LENGTH, message="Too long",
                                severity=IssueSeverity.MEDIUM),
            ],
            suggestions=[ValidationSuggestion(kind=IssueKind.TEMPLATE, message="Use variables")],
        )
        score = QualityScore(clarity=0.5, specificity=0.8, structure=0.65, completeness=0.9, overall=0.7)

        recommendations = build_recommendations(validation, score, criteria=["structure", "completeness", "tone"])

        assert [(r.priority, r.title) for r in recommendations] == [
            ("critical", "Offensive"),
            ("high", "Improve Clarity"),
            ("medium", "Strengthen Structure"),
            ("low", "Use variables"),
        ]


@pytest.mark.unit
@pytest.mark.asyncio
class TestProcess:
    """Test process() end to end with in-memory collaborators."""

    async def test_sql_scenario(self, orchestrator):
        result = await orchestrator.process({"raw": "make query fast", "domain": "sql"})

        assert result.refined.startswith("Optimize the SQL query for performance.")
        assert "execution plan" in result.refined
        assert result.metadata.domain == PromptDomain.SQL
        assert result.metadata.cache_hit is False
        assert "sql_make_query_fast" in result.metadata.rules_applied
        assert result.system.startswith("You are a senior database architect")
        assert result.examples  # SQL always includes examples
        assert result.metadata.degraded == []

    async def test_refined_scores_higher_than_raw(self, orchestrator):
        result = await orchestrator.process({"raw": "make query fast", "domain": "sql"})
        raw = await orchestrator.evaluate("make query fast", domain="sql")

        assert result.score.overall > raw.score.overall

    async def test_domain_detected(self, orchestrator):
        result = await orchestrator.process(ProcessInput(raw="deploy my app with docker and kubernetes"))

        assert result.metadata.domain == PromptDomain.DEVOPS

    async def test_cache_roundtrip(self, orchestrator):
        first = await orchestrator.process({"raw": "make query fast", "domain": "sql"})
        second = await orchestrator.process({"raw": "make  query fast ", "domain": "sql"})

        assert second.metadata.cache_hit is True
        assert second.refined == first.refined
        assert second.score == first.score
        assert second.metadata.fingerprint == first.metadata.fingerprint

        events = orchestrator.telemetry.snapshot()["events"]
        assert events["cache_miss"] == 1
        assert events["cache_hit"] == 1

    async def test_line_structure_preserved(self, orchestrator):
        """Bullets and blank-line sections of the request reach the refined text."""
        raw = "Create a users table.\n\nRequirements:\n- id primary key\n- email unique\n- created_at timestamp"

        result = await orchestrator.process({"raw": raw, "domain": "sql"})

        assert "\n- id primary key\n- email unique\n" in result.refined
        assert "\n\nRequirements:\n" in result.refined
        assert result.original == raw

    async def test_cache_hit_returns_callers_original(self, orchestrator):
        await orchestrator.process({"raw": "make query fast", "domain": "sql"})
        second = await orchestrator.process({"raw": "make  query fast ", "domain": "sql"})

        assert second.metadata.cache_hit is True
        assert second.original == "make  query fast "

    async def test_context_appended(self, orchestrator):
        result = await orchestrator.process({
            "raw": "make query fast",
            "domain": "sql",
            "context": "The orders table has ten million rows",
        })

        assert result.refined.endswith("Additional context: The orders table has ten million rows")
        assert "optimize_caller_context" in result.metadata.rules_applied

    async def test_different_domain_is_a_miss(self, orchestrator):
        first = await orchestrator.process({"raw": "make query fast", "domain": "sql"})
        second = await orchestrator.process({"raw": "make query fast", "domain": "general"})

        assert second.metadata.cache_hit is False
        assert first.metadata.fingerprint != second.metadata.fingerprint

    async def test_without_cache(self, analyzer):
        orchestrator = PromptOrchestrator(analyzer=analyzer)

        await orchestrator.process({"raw": "make query fast"})
        second = await orchestrator.process({"raw": "make query fast"})

        assert second.metadata.cache_hit is False

    async def test_corrupt_cache_entry_is_a_miss(self, orchestrator):
        first = await orchestrator.process({"raw": "make query fast", "domain": "sql"})
        await orchestrator.cache.set(f"process:{first.metadata.fingerprint}", {"garbage": True})

        second = await orchestrator.process({"raw": "make query fast", "domain": "sql"})

        assert second.metadata.cache_hit is False
        assert second.refined == first.refined

    async def test_variables_preserved(self, orchestrator):
        result = await orchestrator.process({
            "raw": "Write a summary of {{document}} for {{audience}}",
            "variables": {"document": "the Q3 report", "audience": "executives"},
        })

        assert "{{document}}" in result.refined
        assert "{{audience}}" in result.refined
        assert result.template is not None
        assert result.template.variables == {"document": "the Q3 report", "audience": "executives"}

    async def test_invalid_input(self, orchestrator):
        with pytest.raises(InputError):
            await orchestrator.process({"raw": "   "})

        with pytest.raises(InputError):
            await orchestrator.process({"raw": "x", "domain": "astrology"})

        with pytest.raises(InputError):
            await orchestrator.process("make query fast")

    async def test_concurrent_requests_coalesce(self, orchestrator):
        with patch.object(orchestrator, "_run_pipeline", wraps=orchestrator._run_pipeline) as pipeline:
            results = await asyncio.gather(
                orchestrator.process({"raw": "make query fast", "domain": "sql"}),
                orchestrator.process({"raw": "make query fast", "domain": "sql"}),
            )

        assert pipeline.call_count == 1
        assert results[0] == results[1]
        assert orchestrator._inflight == {}

    async def test_timeout(self, analyzer):
        cache = InMemoryCache(max_entries=10, default_ttl=60)
        orchestrator = PromptOrchestrator(analyzer=analyzer, cache=cache, timeout_seconds=0.05)

        with patch.object(orchestrator, "_run_pipeline", side_effect=lambda *args: time.sleep(0.3)):
            with pytest.raises(PipelineTimeoutError):
                await orchestrator.process({"raw": "make query fast"})

        # Nothing is cached for a failed run
        assert (await cache.stats())["size"] == 0

    async def test_refine_stage_degrades(self, orchestrator):
        with patch.object(orchestrator.engine, "apply_rules", side_effect=RuleEngineError("boom")):
            result = await orchestrator.process({"raw": "make query fast", "domain": "sql"})

        assert result.refined == "make query fast"
        assert result.metadata.rules_applied == []
        assert result.metadata.degraded == ["refine: rule_engine_failed: boom"]

    async def test_score_stage_degrades(self, orchestrator):
        with patch.object(orchestrator.scorer, "_compute", side_effect=RuntimeError("broken")):
            result = await orchestrator.process({"raw": "make query fast", "domain": "sql"})

        assert result.score.overall == 0.5
        assert result.metadata.degraded == ["score: scoring_failed: broken"]

    async def test_telemetry_failure_is_ignored(self, orchestrator):
        with patch.object(orchestrator.telemetry, "track", side_effect=RuntimeError("down")):
            result = await orchestrator.process({"raw": "make query fast", "domain": "sql"})

        assert result.refined


@pytest.mark.unit
@pytest.mark.asyncio
class TestEvaluateAndCompare:
    """Test evaluate() and compare()."""

    async def test_evaluate_fragment(self, orchestrator):
        result = await orchestrator.evaluate("do thing")

        assert result.validation.is_valid is False
        assert result.recommendations[0].priority == "critical"

    async def test_evaluate_criteria(self, orchestrator):
        result = await orchestrator.evaluate("make query fast", criteria=["specificity"], domain="sql")

        titles = [r.title for r in result.recommendations]
        assert result.domain == PromptDomain.SQL
        assert result.score.specificity < 0.7
        assert "Strengthen Specificity" in titles

    async def test_evaluate_rejects_empty(self, orchestrator):
        with pytest.raises(InputError):
            await orchestrator.evaluate("   ")

    async def test_evaluate_unknown_domain(self, orchestrator):
        with pytest.raises(InputError, match="Unknown domain"):
            await orchestrator.evaluate("make query fast", domain="astrology")

    async def test_compare(self, orchestrator):
        result = await orchestrator.compare(["make query fast", REFINED_SQL])

        assert result.winner_index == 1
        assert result.winner_id == "variant_1"
        assert [v.id for v in result.variants] == ["variant_0", "variant_1"]
        assert result.summary.startswith("variant_1 achieved the highest quality score")
        overall_row = result.comparison[0]
        assert overall_row.metric == "overall"
        assert overall_row.winner == "variant_1"
        assert overall_row.significance == pytest.approx(
            result.variants[1].score.overall - result.variants[0].score.overall
        )

    async def test_compare_tie_goes_to_first(self, orchestrator):
        result = await orchestrator.compare(["make query fast", "make query fast"])

        assert result.winner_index == 0

    async def test_compare_needs_two(self, orchestrator):
        with pytest.raises(InputError, match="At least 2 prompt variants"):
            await orchestrator.compare(["only one"])

    async def test_compare_rejects_empty_variant(self, orchestrator):
        with pytest.raises(InputError):
            await orchestrator.compare(["make query fast", " "])


@pytest.mark.unit
@pytest.mark.asyncio
class TestStoreOperations:
    """Test save/search/get/stats/health."""

    async def test_save_and_get(self, orchestrator):
        saved = await orchestrator.save(
            {"raw": "make query fast", "domain": "sql"},
            SaveMetadata(name="Fast query", domain=PromptDomain.SQL, tags=["sql"]),
        )

        fetched = await orchestrator.get(saved.id)

        assert fetched.prompt.startswith("Optimize the SQL query")
        assert fetched.original == "make query fast"
        assert fetched.system_prompt.startswith("You are a senior database architect")

        page = await orchestrator.search(SearchParams(domain=PromptDomain.SQL))
        assert page.total == 1

        stats = await orchestrator.stats()
        assert stats.total_prompts == 1

    async def test_get_unknown(self, orchestrator):
        with pytest.raises(NotFoundError, match="not found"):
            await orchestrator.get("missing")

    async def test_without_store(self, analyzer):
        orchestrator = PromptOrchestrator(analyzer=analyzer)

        with pytest.raises(StoreError, match="No prompt store configured"):
            await orchestrator.save({"raw": "make query fast"}, SaveMetadata(name="x"))
        with pytest.raises(StoreError):
            await orchestrator.search(SearchParams())

    async def test_health(self, orchestrator, analyzer):
        assert await orchestrator.health() == {"cache": True, "store": True}
        assert await PromptOrchestrator(analyzer=analyzer).health() == {"cache": False, "store": False}

    async def test_close_disconnects_cache(self, orchestrator):
        await orchestrator.close()

        assert await orchestrator.cache.ping() is False

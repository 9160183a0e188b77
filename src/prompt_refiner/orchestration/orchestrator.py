"""
Pipeline orchestrator.

Coordinates the four pure stages (analyze, refine, validate, score) with the
injected collaborators (cache, prompt store, telemetry):

    RECEIVED -> CACHE_LOOKUP -> CACHE_HIT -> DONE
                             -> CACHE_MISS -> ANALYZE -> REFINE -> VALIDATE
                                -> SCORE -> CACHE_WRITE -> DONE

The CPU-bound stages run in a worker thread under the overall pipeline
timeout. Concurrent misses for the same fingerprint share one computation.
The cache is written only after the pipeline completed.
"""

import asyncio
import math
import time
from typing import Any, Dict, List, Optional, Union

import structlog
from pydantic import ValidationError

from ..analysis.analyzer import PromptAnalyzer
from ..analysis.normalizer import normalize_prompt_text
from ..config import settings
from ..exceptions import InputError, NotFoundError, PipelineTimeoutError, StoreError
from ..models.analysis import AnalysisResult
from ..models.enums import IssueSeverity, PromptDomain
from ..models.process import (
    ComparisonResult,
    EvaluationResult,
    MetricComparison,
    ProcessInput,
    ProcessMetadata,
    ProcessResult,
    Recommendation,
    VariantResult,
)
from ..models.refinement import RefinementResult
from ..models.scoring import QualityScore
from ..models.store import SavedPrompt, SaveMetadata, SearchPage, SearchParams, StoreStats
from ..models.validation import ValidationResult
from ..rules.engine import RuleEngine
from ..rules.templates import needs_template, render_template, select_template_type
from ..scoring.scorer import PromptScorer
from ..services.protocols import CacheBackend, PromptStore, Telemetry
from ..validation.validator import PromptValidator
from ..version import get_current_pipeline_version
from .fingerprint import cache_key, compute_fingerprint
from .stages import refine_stage, score_stage


logger = structlog.get_logger(__name__)

EXAMPLE_DOMAINS = {PromptDomain.SQL, PromptDomain.CINE, PromptDomain.SAAS}

SCORE_SUGGESTIONS = [
    ("clarity", "Consider adding more specific details and reducing vague terms"),
    ("specificity", "Add more specific requirements and technical details"),
    ("structure", "Improve sentence structure and logical flow"),
    ("completeness", "Specify expected outputs and success criteria"),
]


# ============================================================================
# HELPERS
# ============================================================================

def should_include_examples(analysis: AnalysisResult, score: QualityScore, domain: PromptDomain) -> bool:
    """Examples help complex or unclear prompts and example-driven domains."""
    return analysis.complexity > 0.6 or score.clarity < 0.7 or domain in EXAMPLE_DOMAINS


def compile_suggestions(
    refinement: RefinementResult,
    validation: ValidationResult,
    score: QualityScore,
    limit: Optional[int] = None,
) -> List[str]:
    """
    Collect user-facing suggestions.

    Order: high-impact rule descriptions, validator suggestions, then one
    message per score dimension below 0.7. Duplicates are dropped and the
    list is capped at limit (default: settings.max_suggestions).
    """
    limit = settings.max_suggestions if limit is None else limit

    suggestions = [r.description for r in refinement.rules_applied if r.impact == "high"]
    suggestions += [s.message for s in validation.suggestions]
    dimensions = score.dimensions()
    suggestions += [message for name, message in SCORE_SUGGESTIONS if dimensions[name] < 0.7]

    return list(dict.fromkeys(suggestions))[:limit]


def cache_ttl(score: QualityScore, base_ttl: Optional[int] = None) -> int:
    """Higher quality results stay cached longer: floor(base * max(0.5, overall))."""
    base_ttl = settings.cache_ttl_seconds if base_ttl is None else base_ttl
    return math.floor(base_ttl * max(0.5, score.overall))


def build_recommendations(
    validation: ValidationResult,
    score: QualityScore,
    criteria: Optional[List[str]] = None,
) -> List[Recommendation]:
    """
    Prioritized recommendations for evaluate().

    - critical: every high or critical validation error
    - high/medium: clarity or specificity below 0.6
    - medium: each requested criterion naming a dimension below 0.7
    - low: every validator suggestion
    """
    recommendations = [
        Recommendation(
            priority="critical",
            title=error.message,
            description=f"This issue must be addressed: {error.message}",
        )
        for error in validation.errors
        if error.severity in (IssueSeverity.CRITICAL, IssueSeverity.HIGH)
    ]

    if score.clarity < 0.6:
        recommendations.append(Recommendation(
            priority="high",
            title="Improve Clarity",
            description=(
                "The prompt contains ambiguous language that may lead to unclear results. "
                "Consider replacing vague terms with more specific language."
            ),
        ))

    if score.specificity < 0.6:
        recommendations.append(Recommendation(
            priority="medium",
            title="Add Specificity",
            description=(
                "The prompt would benefit from more specific requirements, constraints, "
                "or technical details."
            ),
        ))

    dimensions = score.dimensions()
    for criterion in criteria or []:
        name = criterion.strip().lower()
        if name in dimensions and dimensions[name] < 0.7:
            recommendations.append(Recommendation(
                priority="medium",
                title=f"Strengthen {name.capitalize()}",
                description=f"{name.capitalize()} scores {dimensions[name]:.2f}, below the 0.70 target.",
            ))

    recommendations += [
        Recommendation(priority="low", title=s.message, description=s.message)
        for s in validation.suggestions
    ]
    return recommendations


def comparison_summary(variants: List[VariantResult], winner: VariantResult) -> str:
    """Name the winner, its score, the average and its two strongest dimensions."""
    average = sum(v.score.overall for v in variants) / len(variants)
    strengths = sorted(winner.score.dimensions().items(), key=lambda item: item[1], reverse=True)[:2]
    return (
        f"{winner.id} achieved the highest quality score of {winner.score.overall * 100:.1f}% "
        f"(average: {average * 100:.1f}%). "
        f"Key advantages include better {' and '.join(name for name, _ in strengths)}."
    )


def comparison_rows(variants: List[VariantResult]) -> List[MetricComparison]:
    """One row per score dimension; significance is max - min."""
    rows = []
    for metric in ["overall", "clarity", "specificity", "structure", "completeness"]:
        values = {v.id: getattr(v.score, metric) for v in variants}
        winner = max(values, key=values.get)
        rows.append(MetricComparison(
            metric=metric,
            values=values,
            winner=winner,
            significance=max(values.values()) - min(values.values()),
        ))
    return rows


# ============================================================================
# ORCHESTRATOR
# ============================================================================

class PromptOrchestrator:
    """
    Runs the refinement pipeline with injected collaborators.

    All collaborators are optional: without a cache every request is a miss,
    without a store save/search/get raise StoreError, and without telemetry
    events are only logged.
    """

    def __init__(
        self,
        analyzer: Optional[PromptAnalyzer] = None,
        engine: Optional[RuleEngine] = None,
        validator: Optional[PromptValidator] = None,
        scorer: Optional[PromptScorer] = None,
        cache: Optional[CacheBackend] = None,
        store: Optional[PromptStore] = None,
        telemetry: Optional[Telemetry] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.analyzer = analyzer or PromptAnalyzer()
        self.engine = engine or RuleEngine()
        self.validator = validator or PromptValidator(self.analyzer)
        self.scorer = scorer or PromptScorer()
        self.cache = cache
        self.store = store
        self.telemetry = telemetry
        self.timeout_seconds = timeout_seconds or settings.pipeline_timeout_seconds
        self._inflight: Dict[str, asyncio.Task] = {}
        self.logger = logger.bind(component="orchestrator")

    # ------------------------------------------------------------------
    # Collaborator wrappers
    # ------------------------------------------------------------------

    def _track(self, event: str, **data: Any) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry.track(event, data)
        except Exception as e:
            self.logger.warning("telemetry_failed", telemetry_event=event, error=str(e))

    def _error(self, name: str, err: BaseException, **context: Any) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry.error(name, err, context)
        except Exception as e:
            self.logger.warning("telemetry_failed", telemetry_event=name, error=str(e))

    def _metric(self, name: str, value: float, **labels: str) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry.metric(name, value, "histogram", labels)
        except Exception as e:
            self.logger.warning("telemetry_failed", metric=name, error=str(e))

    @property
    def cache_active(self) -> bool:
        return self.cache is not None and settings.cache_enabled

    async def _cache_get(self, key: str) -> Optional[ProcessResult]:
        if not self.cache_active:
            return None
        try:
            payload = await self.cache.get(key)
            if payload is None:
                return None
            return ProcessResult.model_validate(payload)
        except ValidationError as e:
            self.logger.warning("cache_entry_invalid", key=key, error=str(e))
        except Exception as e:
            self.logger.warning("cache_get_failed", key=key, error=str(e))
        return None

    async def _cache_set(self, key: str, result: ProcessResult) -> None:
        if not self.cache_active:
            return
        try:
            await self.cache.set(key, result.model_dump(mode="json"), ttl=cache_ttl(result.score))
        except Exception as e:
            self.logger.warning("cache_set_failed", key=key, error=str(e))

    def _require_store(self) -> PromptStore:
        if self.store is None:
            raise StoreError("No prompt store configured")
        return self.store

    async def _run_in_thread(self, operation: str, func, *args):
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise PipelineTimeoutError(
                f"{operation} exceeded the {self.timeout_seconds}s pipeline timeout"
            ) from e

    @staticmethod
    def _coerce_input(data: Union[ProcessInput, Dict[str, Any]]) -> ProcessInput:
        if isinstance(data, ProcessInput):
            return data
        if not isinstance(data, dict):
            raise InputError(f"Process input must be a mapping, got {type(data).__name__}")
        try:
            return ProcessInput.model_validate(data)
        except ValidationError as e:
            raise InputError(f"Invalid process input: {e}") from e

    @staticmethod
    def _coerce_domain(domain: Optional[Union[PromptDomain, str]]) -> Optional[PromptDomain]:
        if not domain:
            return None
        try:
            return PromptDomain(domain)
        except ValueError as e:
            raise InputError(f"Unknown domain: {domain}") from e

    @staticmethod
    def _require_text(text: Any, field: str = "prompt") -> str:
        if not isinstance(text, str) or not text.strip():
            raise InputError(f"{field} must contain non-whitespace text")
        if len(text) > settings.max_input_length:
            raise InputError(
                f"{field} exceeds maximum length of {settings.max_input_length} characters (got {len(text)})"
            )
        return text

    # ------------------------------------------------------------------
    # process
    # ------------------------------------------------------------------

    async def process(self, data: Union[ProcessInput, Dict[str, Any]]) -> ProcessResult:
        """
        Refine a prompt.

        Args:
            data: ProcessInput (or a mapping validated into one)

        Returns:
            ProcessResult; metadata.cache_hit is True when served from cache

        Raises:
            InputError: If the input violates the contract
            PipelineTimeoutError: If the pipeline exceeds the timeout
        """
        data = self._coerce_input(data)
        fingerprint = compute_fingerprint(data)
        key = cache_key(fingerprint)

        self._track("process_start", domain=data.domain.value if data.domain else None)

        cached = await self._cache_get(key)
        if cached is not None:
            self.logger.info("cache_hit", fingerprint=fingerprint)
            self._track("cache_hit", fingerprint=fingerprint, domain=cached.metadata.domain.value)
            return cached.model_copy(update={
                "original": data.raw,
                "metadata": cached.metadata.model_copy(update={"cache_hit": True}),
            })

        # No await between lookup and insert, so one task per fingerprint
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._compute(data, fingerprint, key))
            self._inflight[key] = task
            task.add_done_callback(lambda _: self._inflight.pop(key, None))
        else:
            self.logger.debug("process_coalesced", fingerprint=fingerprint)

        return await asyncio.shield(task)

    async def _compute(self, data: ProcessInput, fingerprint: str, key: str) -> ProcessResult:
        self._track("cache_miss", fingerprint=fingerprint)
        try:
            result = await self._run_in_thread("process", self._run_pipeline, data, fingerprint)
        except Exception as e:
            self.logger.error("process_failed", fingerprint=fingerprint, error=str(e))
            self._error("process_error", e, fingerprint=fingerprint)
            raise

        await self._cache_set(key, result)

        self._track(
            "process_complete",
            domain=result.metadata.domain.value,
            overall_score=result.score.overall,
            rules_applied=len(result.metadata.rules_applied),
            degraded=bool(result.metadata.degraded),
        )
        self._metric(
            "process_duration_ms",
            result.metadata.processing_time_ms,
            domain=result.metadata.domain.value,
        )
        return result

    def _run_pipeline(self, data: ProcessInput, fingerprint: str) -> ProcessResult:
        """Synchronous stage sequence; runs in a worker thread."""
        start_time = time.time()
        text = normalize_prompt_text(data.raw)

        analysis = self.analyzer.analyze(text)
        domain = data.domain or self.engine.detect_domain(text, analysis)

        refinement = refine_stage(self.engine, text, domain, analysis, data.tone, data.context)
        refined = refinement.value.refined
        refined_analysis = self.analyzer.analyze(refined)

        validation = self.validator.validate(refined, refined_analysis, domain)
        detailed = score_stage(self.scorer, refined, validation, refined_analysis, domain, original=text)
        score = detailed.value.score

        system = self.engine.system_prompt(domain, analysis, data.context)

        options = data.options
        include_examples = (
            options.include_examples
            if options.include_examples is not None
            else should_include_examples(analysis, score, domain)
        )
        examples = self.engine.examples(domain) if include_examples else []

        generate_template = (
            options.generate_template
            if options.generate_template is not None
            else needs_template(text, analysis, data.variables)
        )
        template = None
        if generate_template:
            template_type = options.template_type or select_template_type(text, data.variables)
            template = render_template(refined, system, domain.value, template_type, data.variables)

        degraded = [
            f"{stage}: {result.degraded_reason}"
            for stage, result in (("refine", refinement), ("score", detailed))
            if result.degraded
        ]

        processing_time_ms = (time.time() - start_time) * 1000
        self.logger.info(
            "process_completed",
            fingerprint=fingerprint,
            domain=domain.value,
            rules_applied=len(refinement.value.rules_applied),
            overall_score=round(score.overall, 4),
            degraded=degraded,
            processing_time_ms=round(processing_time_ms, 2),
        )

        return ProcessResult(
            original=data.raw,
            refined=refined,
            system=system,
            analysis=analysis,
            score=score,
            validation=validation,
            suggestions=compile_suggestions(refinement.value, validation, score),
            examples=examples,
            template=template,
            metadata=ProcessMetadata(
                domain=domain,
                tone=data.tone,
                processing_time_ms=processing_time_ms,
                version=get_current_pipeline_version().to_repr(),
                model_used=data.target_model,
                cache_hit=False,
                rules_applied=[r.rule_id for r in refinement.value.rules_applied],
                template_used=template.type if template else None,
                fingerprint=fingerprint,
                degraded=degraded,
            ),
        )

    # ------------------------------------------------------------------
    # evaluate / compare
    # ------------------------------------------------------------------

    def _assess(self, text: str, domain: Optional[PromptDomain]):
        analysis = self.analyzer.analyze(text)
        domain = domain or self.engine.detect_domain(text, analysis)
        validation = self.validator.validate(text, analysis, domain)
        score = score_stage(self.scorer, text, validation, analysis, domain).value.score
        return domain, analysis, validation, score

    async def evaluate(
        self,
        text: str,
        criteria: Optional[List[str]] = None,
        domain: Optional[Union[PromptDomain, str]] = None,
    ) -> EvaluationResult:
        """
        Score and validate a prompt without refining it.

        Args:
            text: Prompt to evaluate
            criteria: Dimension names to report on explicitly
            domain: Domain (detected when omitted)

        Returns:
            EvaluationResult with prioritized recommendations

        Raises:
            InputError: If text is empty or too long
        """
        text = self._require_text(text)
        domain = self._coerce_domain(domain)
        self._track("evaluation_start", domain=domain.value if domain else None)

        try:
            domain, analysis, validation, score = await self._run_in_thread(
                "evaluate", self._assess, normalize_prompt_text(text), domain
            )
        except Exception as e:
            self._error("evaluation_error", e, domain=domain.value if domain else None)
            raise

        recommendations = build_recommendations(validation, score, criteria)
        self._track(
            "evaluation_complete",
            domain=domain.value,
            overall_score=score.overall,
            recommendation_count=len(recommendations),
        )
        return EvaluationResult(
            score=score,
            validation=validation,
            analysis=analysis,
            recommendations=recommendations,
            domain=domain,
        )

    async def compare(
        self,
        prompts: List[str],
        test_input: Optional[str] = None,
        domain: Optional[Union[PromptDomain, str]] = None,
    ) -> ComparisonResult:
        """
        Score two or more prompt variants and pick the best.

        All variants are scored with the same domain weights (the given
        domain, else the one detected from all variants together). Ties
        on overall score go to the earliest variant.

        Raises:
            InputError: If fewer than two variants or an empty variant is given
        """
        if not isinstance(prompts, list) or len(prompts) < 2:
            raise InputError("At least 2 prompt variants are required for comparison")
        prompts = [normalize_prompt_text(self._require_text(p, field=f"variant_{i}")) for i, p in enumerate(prompts)]

        self._track("comparison_start", variant_count=len(prompts), has_test_input=bool(test_input))

        try:
            variants = await self._run_in_thread(
                "compare", self._score_variants, prompts, self._coerce_domain(domain)
            )
        except Exception as e:
            self._error("comparison_error", e, variant_count=len(prompts))
            raise

        winner_index = max(range(len(variants)), key=lambda i: variants[i].score.overall)
        winner = variants[winner_index]

        self._track(
            "comparison_complete",
            variant_count=len(variants),
            winner_id=winner.id,
            winner_score=winner.score.overall,
        )
        return ComparisonResult(
            variants=variants,
            winner_id=winner.id,
            winner_index=winner_index,
            comparison=comparison_rows(variants),
            summary=comparison_summary(variants, winner),
        )

    def _score_variants(self, prompts: List[str], domain: Optional[PromptDomain]) -> List[VariantResult]:
        domain = domain or self.engine.detect_domain(" ".join(prompts))
        variants = []
        for index, prompt in enumerate(prompts):
            _, analysis, validation, score = self._assess(prompt, domain)
            variants.append(VariantResult(
                id=f"variant_{index}",
                prompt=prompt,
                score=score,
                metrics={
                    "length": float(len(prompt)),
                    "complexity": analysis.complexity,
                    "readability": analysis.readability_score,
                    "error_count": float(len(validation.errors)),
                },
            ))
        return variants

    # ------------------------------------------------------------------
    # Store operations
    # ------------------------------------------------------------------

    async def save(self, data: Union[ProcessInput, Dict[str, Any]], metadata: SaveMetadata) -> SavedPrompt:
        """
        Refine a prompt and persist the result.

        Raises:
            InputError: If the input violates the contract
            StoreError: If no store is configured or the store fails
        """
        store = self._require_store()
        result = await self.process(data)

        self._track("save_start", domain=metadata.domain.value, is_public=metadata.is_public)
        try:
            saved = await store.save(
                result.refined,
                result.original,
                metadata,
                result.score,
                system_prompt=result.system,
            )
        except Exception as e:
            self._error("save_error", e, domain=metadata.domain.value)
            raise

        self._track("save_complete", prompt_id=saved.id, quality_score=saved.score.overall)
        return saved

    async def search(self, params: SearchParams) -> SearchPage:
        """Search the store (StoreError if unavailable)."""
        store = self._require_store()
        self._track(
            "search_start",
            domain=params.domain.value if params.domain else None,
            has_query=bool(params.query),
            tag_count=len(params.tags),
        )
        try:
            page = await store.search(params)
        except Exception as e:
            self._error("search_error", e, query=params.query)
            raise

        self._track("search_complete", result_count=len(page.results), total=page.total)
        return page

    async def get(self, prompt_id: str) -> SavedPrompt:
        """
        Fetch a saved prompt.

        Raises:
            NotFoundError: If the id does not exist
        """
        saved = await self._require_store().get_by_id(prompt_id)
        if saved is None:
            raise NotFoundError(f"Prompt {prompt_id} not found")
        return saved

    async def stats(self) -> StoreStats:
        """Aggregate store statistics."""
        return await self._require_store().get_stats()

    async def health(self) -> Dict[str, bool]:
        """Ping the cache and the store; missing collaborators report False."""
        status = {"cache": False, "store": False}
        for name, collaborator in (("cache", self.cache), ("store", self.store)):
            if collaborator is None:
                continue
            try:
                status[name] = bool(await collaborator.ping())
            except Exception as e:
                self.logger.warning("health_ping_failed", collaborator=name, error=str(e))
        return status

    async def close(self) -> None:
        """Release collaborator resources."""
        if self.cache is not None:
            try:
                await self.cache.disconnect()
            except Exception as e:
                self.logger.warning("cache_disconnect_failed", error=str(e))


def build_orchestrator(
    database_url: Optional[str] = None,
    with_store: bool = True,
    with_cache: bool = True,
) -> PromptOrchestrator:
    """
    Orchestrator wired with the default collaborators.

    Args:
        database_url: Store database URL (default: settings.store_db_url)
        with_store: Attach the SQL prompt store
        with_cache: Attach the in-memory cache

    Returns:
        PromptOrchestrator
    """
    from ..services import Database, InMemoryCache, SqlPromptStore, StructlogTelemetry

    return PromptOrchestrator(
        cache=InMemoryCache() if with_cache else None,
        store=SqlPromptStore(Database(url=database_url)) if with_store else None,
        telemetry=StructlogTelemetry(),
    )

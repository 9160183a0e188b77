"""
Per-stage results for the refinement pipeline.

The rule engine and the scorer may degrade instead of failing. Each of
them is wrapped here into a StageResult carrying the value and, when the
fallback was used, the reason. The orchestrator reads degraded_reason to
record the degradation in ProcessMetadata; every other stage error
propagates unchanged.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

import structlog

from ..models.analysis import AnalysisResult
from ..models.enums import PromptDomain, PromptTone
from ..models.refinement import RefinementResult
from ..models.scoring import DetailedScore
from ..models.validation import ValidationResult
from ..exceptions import RuleEngineError
from ..rules.engine import RuleEngine, degraded_refinement
from ..scoring.scorer import PromptScorer


logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Value produced by a stage, plus the degradation reason if any."""
    value: T
    degraded_reason: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.degraded_reason is not None


def refine_stage(
    engine: RuleEngine,
    text: str,
    domain: Union[PromptDomain, str],
    analysis: Optional[AnalysisResult] = None,
    tone: Optional[Union[PromptTone, str]] = None,
    context: Optional[str] = None,
) -> StageResult[RefinementResult]:
    """
    Run the rule engine; a failing rule yields the original text.

    Returns:
        StageResult wrapping the RefinementResult
    """
    try:
        result = engine.apply_rules(text, domain, analysis, tone=tone, context=context)
    except RuleEngineError as e:
        logger.warning("refinement_degraded", domain=PromptDomain(domain).value, error=str(e))
        result = degraded_refinement(text, e)
    return StageResult(value=result, degraded_reason=result.degraded_reason)


def score_stage(
    scorer: PromptScorer,
    text: str,
    validation: ValidationResult,
    analysis: AnalysisResult,
    domain: Union[PromptDomain, str],
    original: Optional[str] = None,
) -> StageResult[DetailedScore]:
    """
    Run the scorer; its internal fallback is surfaced as the degraded reason.

    Returns:
        StageResult wrapping the DetailedScore
    """
    detailed = scorer.calculate_detailed(text, validation, analysis, domain, original=original)
    return StageResult(value=detailed, degraded_reason=detailed.degraded_reason)

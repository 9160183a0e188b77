"""
Quality scoring for prompts.

Combines surface signals, analysis and validation into four dimensions:
- Clarity: ambiguity, readability, vague terms, capitalization/punctuation
- Specificity: technical density, details, requirements, domain hints
- Structure: grammar, logical flow, length, action verbs, sections
- Completeness: objectives, context, requirements, expected output,
  domain vocabulary, validation outcome

overall is the domain-weighted sum of the dimensions. The scorer never
raises: on internal failure it returns a neutral score
(settings.score_fallback_value on every dimension).
"""

import re
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Union

import numpy as np
import structlog

from ..analysis import signals
from ..config import settings
from ..exceptions import ScoringError
from ..models.analysis import AnalysisResult
from ..models.enums import PromptDomain
from ..models.scoring import DetailedScore, QualityScore, ScoreComparison, ScoreFactor
from ..models.validation import ValidationResult
from ..rules.domains import DOMAIN_RULE_SETS

logger = structlog.get_logger(__name__)

MAX_FACTORS = 8

DOMAIN_COMPLETENESS_PATTERNS = {
    PromptDomain.SQL: (r"table|schema|database", r"constraint|index|key"),
    PromptDomain.BRANDING: (r"audience|target|brand", r"voice|tone|message"),
    PromptDomain.CINE: (r"character|story|script", r"scene|dialogue|format"),
    PromptDomain.SAAS: (r"user|feature|platform", r"scalable|integration|api"),
    PromptDomain.DEVOPS: (r"deploy|infrastructure|pipeline", r"security|monitoring|automation"),
}


# ============================================================================
# WEIGHTS
# ============================================================================

@dataclass
class QualityWeights:
    """
    Weights of the four quality dimensions (sum to 1.0).
    """
    clarity: float = 0.25
    specificity: float = 0.25
    structure: float = 0.25
    completeness: float = 0.25

    @classmethod
    def from_config(cls) -> "QualityWeights":
        """Default weights from settings."""
        return cls(
            clarity=settings.score_weight_clarity,
            specificity=settings.score_weight_specificity,
            structure=settings.score_weight_structure,
            completeness=settings.score_weight_completeness,
        )

    @classmethod
    def for_domain(cls, domain: Union[PromptDomain, str]) -> "QualityWeights":
        """Weights of a domain's rule set; settings defaults for extended domains."""
        rule_set = DOMAIN_RULE_SETS.get(PromptDomain(domain))
        if rule_set is None:
            return cls.from_config()
        return cls(**rule_set.weights)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def normalized(self) -> "QualityWeights":
        """Return weights scaled to sum to 1.0 (logs a warning when they did not)."""
        total = sum(self.as_dict().values())
        if np.isclose(total, 1.0):
            return self
        logger.warning("quality_weights_do_not_sum_to_1", weights=self.as_dict(), sum=total)
        if total <= 0:
            return QualityWeights()
        return QualityWeights(**{k: v / total for k, v in self.as_dict().items()})


def _clip(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


# ============================================================================
# SCORER
# ============================================================================

class PromptScorer:
    """
    Heuristic prompt scorer.

    Weights come from (in order): the weights argument, the domain's rule
    set, settings defaults.
    """

    def __init__(
        self,
        weights: Optional[QualityWeights] = None,
        tie_threshold: Optional[float] = None,
        fallback_value: Optional[float] = None,
    ):
        """
        Args:
            weights: Fixed weights for every domain
            tie_threshold: |overall difference| below which compare() ties
            fallback_value: Value of every dimension in degraded mode
        """
        self.weights = weights.normalized() if weights is not None else None
        self.tie_threshold = tie_threshold if tie_threshold is not None else settings.score_tie_threshold
        self.fallback_value = fallback_value if fallback_value is not None else settings.score_fallback_value
        self.logger = logger.bind(component="scorer")

    def weights_for(self, domain: Union[PromptDomain, str]) -> QualityWeights:
        if self.weights is not None:
            return self.weights
        return QualityWeights.for_domain(domain).normalized()

    def fallback_score(self) -> QualityScore:
        value = self.fallback_value
        return QualityScore(clarity=value, specificity=value, structure=value, completeness=value, overall=value)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score(
        self,
        text: str,
        validation: Optional[ValidationResult] = None,
        analysis: Optional[AnalysisResult] = None,
        domain: Union[PromptDomain, str] = PromptDomain.GENERAL,
    ) -> QualityScore:
        """
        Score a prompt.

        Returns:
            QualityScore (the neutral fallback score on internal failure)
        """
        return self.calculate_detailed(text, validation, analysis, domain).score

    def calculate_detailed(
        self,
        text: str,
        validation: Optional[ValidationResult] = None,
        analysis: Optional[AnalysisResult] = None,
        domain: Union[PromptDomain, str] = PromptDomain.GENERAL,
        original: Optional[str] = None,
    ) -> DetailedScore:
        """
        Score a prompt with factor breakdown, confidence and improvement.

        Args:
            text: Prompt to score
            validation: Validation of text
            analysis: Analysis of text
            domain: Domain selecting the weights
            original: Pre-refinement text (enables the improvement estimate)

        Returns:
            DetailedScore; degraded_reason is set when the fallback was used
        """
        try:
            score = self._compute(text, validation, analysis, domain)
            factors = self._factors(text, analysis)
        except Exception as e:
            reason = f"scoring_failed: {e}"
            self.logger.warning("scoring_degraded", error=str(e), error_type=type(e).__name__)
            return DetailedScore(
                score=self.fallback_score(),
                factors=[],
                confidence=0.5,
                improvement=0.0,
                degraded_reason=reason,
            )

        return DetailedScore(
            score=score,
            factors=factors,
            confidence=self._confidence(text, validation, analysis),
            improvement=self._improvement(text, original),
        )

    def compare(self, a: QualityScore, b: QualityScore) -> ScoreComparison:
        """
        Compare two scores (b relative to a).

        |overall difference| below tie_threshold is a tie; otherwise the
        higher overall wins. significance = |overall difference|.
        """
        differences = {name: b_value - a.dimensions()[name] for name, b_value in b.dimensions().items()}
        overall_diff = b.overall - a.overall
        differences["overall"] = overall_diff

        if abs(overall_diff) < self.tie_threshold:
            winner = "tie"
        else:
            winner = "b" if overall_diff > 0 else "a"

        dimension, delta = max(
            ((name, value) for name, value in differences.items() if name != "overall"),
            key=lambda item: abs(item[1]),
        )
        if winner == "tie":
            summary = (
                f"Scores are within {self.tie_threshold:.0%} of each other; "
                f"largest difference in {dimension} ({delta:+.2f})."
            )
        else:
            summary = (
                f"Prompt {winner.upper()} scores {abs(overall_diff):.1%} higher overall; "
                f"largest difference in {dimension} ({delta:+.2f})."
            )

        return ScoreComparison(
            winner=winner,
            differences=differences,
            significance=_clip(abs(overall_diff)),
            summary=summary,
        )

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    def _compute(
        self,
        text: str,
        validation: Optional[ValidationResult],
        analysis: Optional[AnalysisResult],
        domain: Union[PromptDomain, str],
    ) -> QualityScore:
        if not isinstance(text, str):
            raise ScoringError(f"Cannot score {type(text).__name__}")

        dimensions = {
            "clarity": self._clarity(text, analysis),
            "specificity": self._specificity(text, analysis),
            "structure": self._structure(text),
            "completeness": self._completeness(text, validation, PromptDomain(domain)),
        }
        weights = self.weights_for(domain).as_dict()
        overall = sum(dimensions[name] * weights[name] for name in dimensions)

        return QualityScore(overall=_clip(overall), **dimensions)

    def _clarity(self, text: str, analysis: Optional[AnalysisResult]) -> float:
        score = 1.0
        if analysis is not None:
            score -= analysis.ambiguity_score * 0.4
            score -= (1 - analysis.readability_score) * 0.3

        word_count = len(text.split()) or 1
        score -= signals.count_scorer_vague_terms(text) / word_count * 0.3

        if signals.has_good_grammar(text):
            score += 0.1
        if analysis is not None and analysis.technical_terms:
            score += min(0.1, len(analysis.technical_terms) * 0.02)

        return _clip(score)

    def _specificity(self, text: str, analysis: Optional[AnalysisResult]) -> float:
        score = 0.5
        if analysis is not None:
            score += len(analysis.technical_terms) / (len(text.split()) or 1) * 0.3
            score += len(analysis.domain_hints) * 0.1

        if signals.SPECIFIC_DETAILS_RE.search(text):
            score += 0.2
        if signals.REQUIREMENTS_RE.search(text):
            score += 0.2
        if signals.GENERIC_RE.search(text):
            score -= 0.3
        if signals.EXAMPLES_RE.search(text):
            score += 0.15

        return _clip(score)

    def _structure(self, text: str) -> float:
        score = 0.5
        if signals.has_good_grammar(text):
            score += 0.2
        if signals.LOGICAL_FLOW_RE.search(text):
            score += 0.2
        score += signals.length_score(len(text)) * 0.15
        if signals.has_action_verb(text):
            score += 0.15
        if signals.has_run_on_sentence(text):
            score -= 0.2
        if signals.STRUCTURED_CONTENT_RE.search(text):
            score += 0.1

        return _clip(score)

    def _completeness(
        self, text: str, validation: Optional[ValidationResult], domain: PromptDomain
    ) -> float:
        score = 0.3
        if signals.has_action_verb(text):
            score += 0.3
        if len(text) > 100:
            score += 0.2
        if signals.REQUIREMENTS_RE.search(text):
            score += 0.15
        if signals.EXPECTED_OUTPUT_RE.search(text):
            score += 0.15

        lowered = text.lower()
        for pattern in DOMAIN_COMPLETENESS_PATTERNS.get(domain, ()):
            if re.search(pattern, lowered):
                score += 0.05

        if validation is not None:
            if not validation.errors:
                score += 0.1
            if not validation.warnings:
                score += 0.05

        return _clip(score)

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    def _factors(self, text: str, analysis: Optional[AnalysisResult]) -> List[ScoreFactor]:
        factors: List[ScoreFactor] = []

        if analysis is not None:
            if analysis.ambiguity_score > 0.5:
                factors.append(ScoreFactor(
                    name="Ambiguity", weight=0.4, score=1 - analysis.ambiguity_score,
                    description="Contains ambiguous or vague terms that may lead to unclear results",
                ))
            if analysis.readability_score < 0.6:
                factors.append(ScoreFactor(
                    name="Readability", weight=0.3, score=analysis.readability_score,
                    description="Text complexity and readability level",
                ))

        vague_count = signals.count_scorer_vague_terms(text)
        if vague_count:
            factors.append(ScoreFactor(
                name="Specific Language", weight=0.3, score=max(0.0, 1 - vague_count / 10),
                description=f"Contains {vague_count} vague terms that could be more specific",
            ))

        if analysis is not None:
            factors.append(ScoreFactor(
                name="Technical Terminology", weight=0.3,
                score=min(1.0, len(analysis.technical_terms) / 5),
                description=f"Uses {len(analysis.technical_terms)} technical terms",
            ))
            if analysis.domain_hints:
                factors.append(ScoreFactor(
                    name="Domain Expertise", weight=0.25,
                    score=min(1.0, len(analysis.domain_hints) / 3),
                    description=f"Shows knowledge of {len(analysis.domain_hints)} domain(s)",
                ))

        if signals.SPECIFIC_DETAILS_RE.search(text):
            factors.append(ScoreFactor(
                name="Specific Details", weight=0.2, score=1.0,
                description="Includes specific numbers, formats, or constraints",
            ))
        if signals.has_good_grammar(text):
            factors.append(ScoreFactor(
                name="Grammar & Punctuation", weight=0.2, score=1.0,
                description="Proper grammar and punctuation",
            ))
        if signals.LOGICAL_FLOW_RE.search(text):
            factors.append(ScoreFactor(
                name="Logical Flow", weight=0.2, score=1.0,
                description="Well-organized with logical progression",
            ))
        factors.append(ScoreFactor(
            name="Appropriate Length", weight=0.15, score=signals.length_score(len(text)),
            description=f"Length: {len(text)} characters",
        ))
        if signals.has_action_verb(text):
            factors.append(ScoreFactor(
                name="Clear Objectives", weight=0.3, score=1.0,
                description="Contains clear action verbs and objectives",
            ))
        if signals.REQUIREMENTS_RE.search(text):
            factors.append(ScoreFactor(
                name="Requirements Specified", weight=0.2, score=1.0,
                description="Includes specific requirements or constraints",
            ))
        if signals.EXPECTED_OUTPUT_RE.search(text):
            factors.append(ScoreFactor(
                name="Expected Output", weight=0.2, score=1.0,
                description="Specifies what kind of output is expected",
            ))

        # Highest impact first: weight * (1 - score)
        factors.sort(key=lambda f: f.weight * (1 - f.score), reverse=True)
        return factors[:MAX_FACTORS]

    def _confidence(
        self, text: str, validation: Optional[ValidationResult], analysis: Optional[AnalysisResult]
    ) -> float:
        confidence = 0.8
        if analysis is not None:
            confidence += 0.1
            if analysis.technical_terms:
                confidence += 0.05
            if analysis.domain_hints:
                confidence += 0.05
        if validation is not None:
            confidence += 0.1
            if not validation.errors:
                confidence += 0.05
        if len(text) < 20 or len(text) > 1000:
            confidence -= 0.1
        return float(np.clip(confidence, 0.5, 1.0))

    def _improvement(self, text: str, original: Optional[str]) -> float:
        if not original:
            return 0.0
        length_ratio = len(text) / len(original)
        return float(min(0.5, max(0.0, length_ratio - 1) * 0.3 + 0.2))


# ============================================================================
# CONVENIENCE
# ============================================================================

def compute_quality_score(
    text: str,
    validation: Optional[ValidationResult] = None,
    analysis: Optional[AnalysisResult] = None,
    domain: Union[PromptDomain, str] = PromptDomain.GENERAL,
    scorer: Optional[PromptScorer] = None,
) -> QualityScore:
    """
    Score text with a default or provided scorer.

    Args:
        text: Prompt text
        validation: Optional validation result
        analysis: Optional analysis
        domain: Domain selecting the weights
        scorer: Optional PromptScorer instance

    Returns:
        QualityScore
    """
    if scorer is None:
        scorer = PromptScorer()
    return scorer.score(text, validation, analysis, domain)

"""
Prompt validator.

Runs structural and quality checks over a prompt and its analysis:
1. Errors - empty, length, offensive content, fragments, high ambiguity,
   incomplete trailing clause
2. Warnings - readability, complexity, context, specificity, structure,
   placeholders, redundancy, language, terminology, domain specifics
3. Suggestions - vague terms, action verb, variables, format, examples
4. Quality metrics - clarity, specificity, structure, completeness,
   consistency, actionability (each clamped to [0, 1])

validate() is deterministic: the same text, analysis and domain always
give the same result.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np
import structlog

from ..analysis import PromptAnalyzer
from ..analysis import signals
from ..config import settings
from ..models.analysis import AnalysisResult
from ..models.enums import IssueKind, IssueSeverity, PromptDomain
from ..models.validation import QualityMetrics, ValidationIssue, ValidationResult, ValidationSuggestion

logger = structlog.get_logger(__name__)


# ============================================================================
# FINDINGS ACCUMULATOR
# ============================================================================

@dataclass
class ValidationFindings:
    """
    Mutable accumulator used while checks run.

    Frozen into a ValidationResult by to_result().
    """
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    suggestions: List[ValidationSuggestion] = field(default_factory=list)

    def add_error(self, code: str, kind: IssueKind, message: str,
                  severity: IssueSeverity = IssueSeverity.HIGH):
        """Add an error (makes the result invalid)."""
        self.errors.append(ValidationIssue(code=code, kind=kind, message=message, severity=severity))

    def add_warning(self, code: str, kind: IssueKind, message: str,
                    severity: IssueSeverity = IssueSeverity.LOW):
        """Add a warning (non-fatal)."""
        self.warnings.append(ValidationIssue(code=code, kind=kind, message=message, severity=severity))

    def add_suggestion(self, kind: IssueKind, message: str,
                       before: Optional[str] = None, after: Optional[str] = None):
        self.suggestions.append(ValidationSuggestion(kind=kind, message=message, before=before, after=after))

    def to_result(self, metrics: QualityMetrics) -> ValidationResult:
        return ValidationResult(
            is_valid=not self.errors,
            errors=self.errors,
            warnings=self.warnings,
            suggestions=self.suggestions,
            quality_metrics=metrics,
        )


def _clip(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


class PromptValidator:
    """
    Deterministic validator for prompts.

    Thresholds come from settings (validator_*).
    """

    def __init__(self, analyzer: Optional[PromptAnalyzer] = None):
        """
        Args:
            analyzer: Analyzer used when validate() gets no analysis
        """
        self.analyzer = analyzer or PromptAnalyzer()
        self.min_length = settings.validator_min_length
        self.max_length = settings.validator_max_length
        self.ambiguity_error = settings.validator_ambiguity_error
        self.ambiguity_warning = settings.validator_ambiguity_warning
        self.min_readability = settings.validator_min_readability
        self.redundancy_threshold = settings.validator_redundancy_threshold
        self.logger = logger.bind(component="validator")

    def validate(
        self,
        text: str,
        analysis: Optional[AnalysisResult] = None,
        domain: Optional[Union[PromptDomain, str]] = None,
    ) -> ValidationResult:
        """
        Validate a prompt.

        Args:
            text: Prompt text
            analysis: Analysis of text (computed when omitted)
            domain: Domain used for terminology and domain-specific checks

        Returns:
            ValidationResult; is_valid is False whenever errors exist
        """
        findings = ValidationFindings()
        text = text if isinstance(text, str) else ""

        if not text.strip():
            findings.add_error(
                "EMPTY_PROMPT", IssueKind.EMPTY,
                "Prompt cannot be empty or contain only whitespace.",
                IssueSeverity.CRITICAL,
            )
            return findings.to_result(QualityMetrics.zero())

        if analysis is None:
            analysis = self.analyzer.analyze(text)
        domain = PromptDomain(domain) if domain else None

        self._check_errors(text, analysis, findings)
        self._check_warnings(text, analysis, domain, findings)
        self._suggest(text, analysis, findings)
        metrics = self.quality_metrics(text, analysis)

        self.logger.debug(
            "validation_complete",
            is_valid=not findings.errors,
            errors=len(findings.errors),
            warnings=len(findings.warnings),
            suggestions=len(findings.suggestions),
        )
        return findings.to_result(metrics)

    # ========================================================================
    # ERRORS
    # ========================================================================

    def _check_errors(self, text: str, analysis: AnalysisResult, findings: ValidationFindings):
        length = len(text)
        if length < self.min_length:
            findings.add_error(
                "PROMPT_TOO_SHORT", IssueKind.LENGTH,
                f"Prompt is too short ({length} characters). Minimum is {self.min_length} characters.",
            )
        if length > self.max_length:
            findings.add_error(
                "PROMPT_TOO_LONG", IssueKind.LENGTH,
                f"Prompt is too long ({length} characters). Maximum is {self.max_length} characters.",
                IssueSeverity.MEDIUM,
            )

        if signals.OFFENSIVE_RE.search(text):
            findings.add_error(
                "OFFENSIVE_CONTENT", IssueKind.CONTENT,
                "Prompt contains potentially offensive or inappropriate content.",
                IssueSeverity.CRITICAL,
            )

        if len(text.split()) < 3 or not any(ch.isalpha() for ch in text):
            findings.add_error(
                "LACKS_STRUCTURE", IssueKind.STRUCTURE,
                "Prompt lacks basic grammatical structure or contains only fragments.",
            )

        if analysis.ambiguity_score > self.ambiguity_error:
            findings.add_error(
                "HIGH_AMBIGUITY", IssueKind.CLARITY,
                f"Prompt has a very high ambiguity score ({analysis.ambiguity_score:.0%}).",
            )

        if signals.ends_mid_clause(text):
            findings.add_error(
                "INCOMPLETE_PROMPT", IssueKind.COMPLETENESS,
                "Prompt ends mid-sentence; the last clause is incomplete.",
                IssueSeverity.MEDIUM,
            )

    # ========================================================================
    # WARNINGS
    # ========================================================================

    def _check_warnings(
        self,
        text: str,
        analysis: AnalysisResult,
        domain: Optional[PromptDomain],
        findings: ValidationFindings,
    ):
        words = analysis.word_count
        lowered = text.lower()

        if self.ambiguity_warning < analysis.ambiguity_score <= self.ambiguity_error:
            findings.add_warning(
                "MODERATE_AMBIGUITY", IssueKind.CLARITY,
                f"Prompt has a high ambiguity score ({analysis.ambiguity_score:.0%}). "
                "This may lead to unclear results.",
                IssueSeverity.MEDIUM,
            )

        if words and analysis.readability_score < self.min_readability:
            findings.add_warning(
                "LOW_READABILITY", IssueKind.CLARITY,
                f"Prompt has a low readability score ({analysis.readability_score:.0%}).",
            )
            if words > 60 and not signals.STRUCTURED_CONTENT_RE.search(text):
                findings.add_warning(
                    "LONG_UNSTRUCTURED", IssueKind.STRUCTURE,
                    "Long prompt with low readability and no sections.",
                    IssueSeverity.MEDIUM,
                )
                findings.add_suggestion(
                    IssueKind.STRUCTURE,
                    "Break the prompt into sections or bullet points, one requirement per line",
                )

        if analysis.complexity > 0.8:
            findings.add_warning(
                "HIGH_COMPLEXITY", IssueKind.STRUCTURE,
                "Prompt has very high complexity. Consider splitting it into focused tasks.",
            )

        if len(text) < 50 and analysis.ambiguity_score > 0.6 and not analysis.technical_terms:
            findings.add_warning(
                "NEEDS_CONTEXT", IssueKind.COMPLETENESS,
                "Prompt may benefit from additional context or background information.",
                IssueSeverity.MEDIUM,
            )

        if words >= 5 and len(analysis.technical_terms) / words < 0.05:
            findings.add_warning(
                "LOW_SPECIFICITY", IssueKind.SPECIFICITY,
                "Prompt uses few technical or domain-specific terms.",
            )

        if analysis.has_variables:
            findings.add_warning(
                "TEMPLATE_VARIABLES", IssueKind.TEMPLATE,
                "Prompt contains placeholder syntax; make sure every variable is defined.",
            )
            placeholders = [e.text for e in analysis.entities if e.label in ("TEMPLATE_VARIABLE", "VARIABLE")]
            findings.add_suggestion(
                IssueKind.TEMPLATE,
                "Define a value or description for each template variable",
                before=", ".join(dict.fromkeys(placeholders)) or None,
            )

        repeated = self._repeated_lemmas(analysis)
        if repeated:
            findings.add_warning(
                "REDUNDANT_TERMS", IssueKind.REDUNDANCY,
                f"Terms repeated more than {self.redundancy_threshold} times: {', '.join(repeated)}",
            )

        if analysis.language == "es":
            findings.add_warning(
                "NON_ENGLISH", IssueKind.LANGUAGE,
                "Prompt is not in English; results are usually better with English prompts.",
            )
            findings.add_suggestion(IssueKind.LANGUAGE, "Rewrite the prompt in English")
        if signals.has_mixed_languages(text):
            findings.add_warning(
                "MIXED_LANGUAGES", IssueKind.LANGUAGE,
                "Prompt mixes languages which may affect processing quality.",
            )

        if domain == PromptDomain.SQL and signals.NOSQL_RE.search(text):
            findings.add_warning(
                "TERMINOLOGY_MISMATCH", IssueKind.TERMINOLOGY,
                "NoSQL vocabulary used in a SQL request.",
                IssueSeverity.MEDIUM,
            )

        hinted = set(analysis.domain_hints)
        if domain is not None:
            hinted.add(domain.value)
        if "sql" in hinted and "table" not in lowered and "query" not in lowered:
            findings.add_warning(
                "SQL_MISSING_SPECIFICS", IssueKind.SPECIFICITY,
                "SQL request may need more specific table or query details.",
            )
        if "branding" in hinted and "audience" not in lowered and "brand" not in lowered:
            findings.add_warning(
                "BRANDING_MISSING_CONTEXT", IssueKind.COMPLETENESS,
                "Branding request may need target audience or brand context.",
            )

    def _repeated_lemmas(self, analysis: AnalysisResult) -> List[str]:
        counts = Counter(
            token.lemma.lower() for token in analysis.tokens
            if not token.is_stop_word and len(token.lemma) > 2 and token.lemma.isalpha()
        )
        return sorted(lemma for lemma, count in counts.items() if count > self.redundancy_threshold)

    # ========================================================================
    # SUGGESTIONS
    # ========================================================================

    def _suggest(self, text: str, analysis: AnalysisResult, findings: ValidationFindings):
        vague = signals.find_vague_terms(text)
        if vague:
            findings.add_suggestion(
                IssueKind.CLARITY,
                f"Replace vague terms: {', '.join(vague)}",
                before=vague[0],
                after=signals.VAGUE_REPLACEMENTS[vague[0]],
            )

        if not signals.has_action_verb(text):
            findings.add_suggestion(
                IssueKind.ACTIONABILITY,
                "Add a clear action verb to specify what you want accomplished",
                before=text[:30] + "...",
                after="Generate/create/analyze/explain " + text[:30] + "...",
            )

        if not analysis.has_variables and signals.could_use_variables(text):
            findings.add_suggestion(
                IssueKind.TEMPLATE,
                "Consider using template variables for reusability",
                before="Create a table for users",
                after="Create a table for {{entity_type}}",
            )

        lowered = text.lower()
        if analysis.complexity > 0.5 and not any(k in lowered for k in signals.FORMAT_KEYWORDS):
            findings.add_suggestion(
                IssueKind.COMPLETENESS,
                "Specify desired output format",
                after="Format: [specify format requirements]",
            )

        if analysis.complexity > 0.6 and "example" not in lowered:
            findings.add_suggestion(
                IssueKind.SPECIFICITY,
                "Request examples for complex tasks",
                after="Please include examples to illustrate the solution.",
            )

        if "sql" in analysis.domain_hints and "constraint" not in lowered:
            findings.add_suggestion(
                IssueKind.SPECIFICITY,
                "Consider specifying constraints and relationships",
                after="Include appropriate constraints, foreign keys, and indexes",
            )
        if "branding" in analysis.domain_hints and "tone" not in lowered:
            findings.add_suggestion(
                IssueKind.SPECIFICITY,
                "Specify brand tone and voice",
                after="Define the desired brand tone (professional, friendly, etc.)",
            )

    # ========================================================================
    # QUALITY METRICS
    # ========================================================================

    def quality_metrics(self, text: str, analysis: AnalysisResult) -> QualityMetrics:
        """Compute the six quality metrics, each clamped to [0, 1]."""
        words = max(analysis.word_count, 1)
        has_verb = signals.has_action_verb(text)
        has_constraints = bool(signals.CONSTRAINTS_RE.search(text))

        clarity = (
            1.0
            - analysis.ambiguity_score * 0.4
            - (1 - analysis.readability_score) * 0.3
            - len(signals.find_vague_terms(text)) / words * 0.3
        )

        specificity = 0.5 + len(analysis.technical_terms) / words * 0.3
        if signals.SPECIFIC_DETAILS_RE.search(text):
            specificity += 0.2
        if has_constraints:
            specificity += 0.2
        if signals.GENERIC_RE.search(text):
            specificity -= 0.3
        specificity += len(analysis.domain_hints) * 0.1

        structure = 0.5
        if signals.has_good_grammar(text):
            structure += 0.2
        if signals.LOGICAL_FLOW_RE.search(text):
            structure += 0.2
        if signals.has_terminal_punctuation(text):
            structure += 0.1
        structure += signals.length_score(len(text), upper=1000) * 0.1
        if signals.has_run_on_sentence(text):
            structure -= 0.2

        completeness = 0.3
        if has_verb:
            completeness += 0.3
        if len(text) > 80 or len(analysis.technical_terms) > 2:
            completeness += 0.2
        if has_constraints:
            completeness += 0.1
        if signals.EXPECTED_OUTPUT_RE.search(text):
            completeness += 0.1

        consistency = 1.0
        if signals.has_mixed_languages(text):
            consistency -= 0.3
        if signals.has_inconsistent_terminology(text):
            consistency -= 0.2
        if signals.CONFLICT_RE.search(text):
            consistency -= 0.4
        # Agreement among the core dimensions
        core = [_clip(clarity), _clip(structure), _clip(specificity)]
        consistency -= (max(core) - min(core)) * 0.2

        actionability = 0.2
        if has_verb:
            actionability += 0.4
        if signals.DELIVERABLES_RE.search(text):
            actionability += 0.2
        if signals.MEASURABLE_RE.search(text):
            actionability += 0.1
        if signals.ABSTRACT_RE.search(text):
            actionability -= 0.3
        actionability += min(0.1, len(analysis.technical_terms) * 0.02)
        actionability -= analysis.ambiguity_score * 0.1

        return QualityMetrics(
            clarity=_clip(clarity),
            specificity=_clip(specificity),
            structure=_clip(structure),
            completeness=_clip(completeness),
            consistency=_clip(consistency),
            actionability=_clip(actionability),
        )


# ============================================================================
# CONVENIENCE
# ============================================================================

def validate_prompt(
    text: str,
    analysis: Optional[AnalysisResult] = None,
    domain: Optional[Union[PromptDomain, str]] = None,
    validator: Optional[PromptValidator] = None,
) -> ValidationResult:
    """
    Validate text with a default or provided validator.

    Args:
        text: Prompt text
        analysis: Optional precomputed analysis
        domain: Optional domain
        validator: Optional PromptValidator instance

    Returns:
        ValidationResult
    """
    if validator is None:
        validator = PromptValidator()
    return validator.validate(text, analysis, domain)


def format_validation_report(result: ValidationResult) -> str:
    """Human readable multi-line summary (used by the CLI)."""
    lines = [f"Valid: {'yes' if result.is_valid else 'no'}"]
    for issue in result.errors:
        lines.append(f"  ERROR   [{issue.code}] {issue.message}")
    for issue in result.warnings:
        lines.append(f"  WARNING [{issue.code}] {issue.message}")
    for suggestion in result.suggestions:
        lines.append(f"  SUGGEST {suggestion.message}")
    return "\n".join(lines)

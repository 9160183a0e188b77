# Data models for the prompt refinement pipeline

from .enums import (
    IssueKind,
    IssueSeverity,
    PromptDomain,
    PromptTone,
    RuleCategory,
    TemplateType,
)
from .entity import Entity
from .analysis import AnalysisResult, Intent, Token
from .validation import QualityMetrics, ValidationIssue, ValidationResult, ValidationSuggestion
from .scoring import DetailedScore, QualityScore, ScoreComparison, ScoreFactor
from .refinement import AppliedRule, Example, Improvement, RefinementResult, TemplateResult
from .process import (
    ComparisonResult,
    EvaluationResult,
    MetricComparison,
    ProcessInput,
    ProcessMetadata,
    ProcessOptions,
    ProcessResult,
    Recommendation,
    VariantResult,
)
from .store import SavedPrompt, SaveMetadata, SearchPage, SearchParams, SearchResult, StoreStats
from .pipeline_version import PipelineVersion

__all__ = [
    # Enums
    "IssueKind",
    "IssueSeverity",
    "PromptDomain",
    "PromptTone",
    "RuleCategory",
    "TemplateType",
    # Analysis
    "Entity",
    "Token",
    "Intent",
    "AnalysisResult",
    # Validation
    "QualityMetrics",
    "ValidationIssue",
    "ValidationSuggestion",
    "ValidationResult",
    # Scoring
    "QualityScore",
    "ScoreFactor",
    "DetailedScore",
    "ScoreComparison",
    # Refinement
    "AppliedRule",
    "Improvement",
    "RefinementResult",
    "Example",
    "TemplateResult",
    # Process
    "ProcessOptions",
    "ProcessInput",
    "ProcessMetadata",
    "ProcessResult",
    "Recommendation",
    "EvaluationResult",
    "VariantResult",
    "MetricComparison",
    "ComparisonResult",
    # Store
    "SaveMetadata",
    "SavedPrompt",
    "SearchParams",
    "SearchResult",
    "SearchPage",
    "StoreStats",
    # Versioning
    "PipelineVersion",
]

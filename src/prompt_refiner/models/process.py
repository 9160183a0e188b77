"""
Orchestrator input/output models.

Defines Pydantic models for:
- Process input contract (raw text, domain, tone, context, variables, target model)
- Process result and metadata
- Evaluation and comparison results
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..config import settings
from .analysis import AnalysisResult
from .enums import PromptDomain, PromptTone, TemplateType
from .refinement import Example, TemplateResult
from .scoring import QualityScore
from .validation import ValidationResult


# ============================================================================
# PROCESS
# ============================================================================

class ProcessOptions(BaseModel):
    """Optional switches for process()."""
    include_examples: Optional[bool] = Field(
        default=None, description="Force examples on/off (default: heuristic)"
    )
    generate_template: Optional[bool] = Field(
        default=None, description="Force template generation on/off (default: heuristic)"
    )
    template_type: Optional[TemplateType] = Field(
        default=None, description="Template family (default: selected from the prompt)"
    )

    model_config = {"frozen": True}


class ProcessInput(BaseModel):
    """
    Input contract for process().

    raw must contain at least one non-whitespace character and at most
    settings.max_input_length characters.
    """
    raw: str = Field(..., min_length=1, description="Unstructured prompt text")
    domain: Optional[PromptDomain] = Field(
        default=None, description="Target domain (detected from the text when omitted)"
    )
    tone: Optional[PromptTone] = None
    context: Optional[str] = Field(default=None, max_length=2000)
    variables: Dict[str, str] = Field(default_factory=dict)
    target_model: Optional[str] = None
    options: ProcessOptions = Field(default_factory=ProcessOptions)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "raw": "make query fast",
                "domain": "sql",
                "tone": "technical",
                "variables": {"table": "orders"},
            }
        },
    }

    @field_validator("raw")
    @classmethod
    def validate_raw(cls, v: str) -> str:
        """Reject whitespace-only and oversized prompts."""
        if not v.strip():
            raise ValueError("Prompt must contain non-whitespace text")
        if len(v) > settings.max_input_length:
            raise ValueError(
                f"Prompt exceeds maximum length of {settings.max_input_length} characters "
                f"(got {len(v)})"
            )
        return v


class ProcessMetadata(BaseModel):
    """Bookkeeping for one process() call."""
    domain: PromptDomain
    tone: Optional[PromptTone] = None
    processing_time_ms: float = Field(ge=0.0)
    version: str
    model_used: Optional[str] = None
    cache_hit: bool = False
    rules_applied: List[str] = Field(default_factory=list)
    template_used: Optional[TemplateType] = None
    fingerprint: str
    degraded: List[str] = Field(
        default_factory=list, description="Stages that fell back to degraded output"
    )

    model_config = {"frozen": True}


class ProcessResult(BaseModel):
    """Complete output of process()."""
    original: str
    refined: str
    system: str
    analysis: AnalysisResult
    score: QualityScore
    validation: ValidationResult
    suggestions: List[str] = Field(default_factory=list)
    examples: List[Example] = Field(default_factory=list)
    template: Optional[TemplateResult] = None
    metadata: ProcessMetadata

    model_config = {"frozen": True}


# ============================================================================
# EVALUATE
# ============================================================================

class Recommendation(BaseModel):
    """A prioritized recommendation produced by evaluate()."""
    priority: Literal["critical", "high", "medium", "low"]
    title: str
    description: str

    model_config = {"frozen": True}


class EvaluationResult(BaseModel):
    """Quality evaluation of a prompt without refinement."""
    score: QualityScore
    validation: ValidationResult
    analysis: AnalysisResult
    recommendations: List[Recommendation] = Field(default_factory=list)
    domain: PromptDomain

    model_config = {"frozen": True}


# ============================================================================
# COMPARE
# ============================================================================

class VariantResult(BaseModel):
    """One scored variant in a comparison."""
    id: str
    prompt: str
    score: QualityScore
    metrics: Dict[str, float] = Field(default_factory=dict)

    model_config = {"frozen": True}


class MetricComparison(BaseModel):
    """One comparison row across all variants."""
    metric: str
    values: Dict[str, float]
    winner: str
    significance: float = Field(ge=0.0)

    model_config = {"frozen": True}


class ComparisonResult(BaseModel):
    """Outcome of comparing two or more prompt variants."""
    variants: List[VariantResult]
    winner_id: str
    winner_index: int = Field(ge=0)
    comparison: List[MetricComparison] = Field(default_factory=list)
    summary: str

    model_config = {"frozen": True}

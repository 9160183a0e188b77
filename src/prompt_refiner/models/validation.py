"""
Validator output models.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .enums import IssueKind, IssueSeverity


class ValidationIssue(BaseModel):
    """A validation error or warning."""
    code: str = Field(description="Stable machine code, e.g. PROMPT_TOO_SHORT")
    kind: IssueKind
    message: str
    severity: IssueSeverity = IssueSeverity.MEDIUM
    field: Optional[str] = None

    model_config = {"frozen": True}


class ValidationSuggestion(BaseModel):
    """An actionable suggestion, optionally with a before/after illustration."""
    kind: IssueKind
    message: str
    before: Optional[str] = None
    after: Optional[str] = None

    model_config = {"frozen": True}


class QualityMetrics(BaseModel):
    """Per-dimension quality metrics computed by the validator."""
    clarity: float = Field(ge=0.0, le=1.0)
    specificity: float = Field(ge=0.0, le=1.0)
    structure: float = Field(ge=0.0, le=1.0)
    completeness: float = Field(ge=0.0, le=1.0)
    consistency: float = Field(ge=0.0, le=1.0)
    actionability: float = Field(ge=0.0, le=1.0)

    model_config = {"frozen": True}

    @classmethod
    def zero(cls) -> "QualityMetrics":
        """All metrics at 0.0 (used for empty input)."""
        return cls(
            clarity=0.0,
            specificity=0.0,
            structure=0.0,
            completeness=0.0,
            consistency=0.0,
            actionability=0.0,
        )


class ValidationResult(BaseModel):
    """
    Structured validation findings.

    is_valid is False whenever errors is non-empty; warnings and
    suggestions never affect validity.
    """
    is_valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    suggestions: List[ValidationSuggestion] = Field(default_factory=list)
    quality_metrics: QualityMetrics

    model_config = {"frozen": True}

    def has_kind(self, kind: IssueKind) -> bool:
        """True if any error or warning has the given kind."""
        return any(issue.kind == kind for issue in self.errors + self.warnings)

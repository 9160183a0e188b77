"""
Quality score models.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class QualityScore(BaseModel):
    """
    Four-dimension quality score.

    overall is the domain-weighted sum of the four dimensions.
    """
    clarity: float = Field(ge=0.0, le=1.0)
    specificity: float = Field(ge=0.0, le=1.0)
    structure: float = Field(ge=0.0, le=1.0)
    completeness: float = Field(ge=0.0, le=1.0)
    overall: float = Field(ge=0.0, le=1.0)

    model_config = {"frozen": True}

    def dimensions(self) -> Dict[str, float]:
        """The four dimensions as a dict, in declaration order."""
        return {
            "clarity": self.clarity,
            "specificity": self.specificity,
            "structure": self.structure,
            "completeness": self.completeness,
        }


class ScoreFactor(BaseModel):
    """One contributing factor of a detailed score."""
    name: str
    weight: float
    score: float = Field(ge=0.0, le=1.0)
    description: str

    model_config = {"frozen": True}


class DetailedScore(BaseModel):
    """Score with factor breakdown, confidence and improvement estimate."""
    score: QualityScore
    factors: List[ScoreFactor] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)
    improvement: float = Field(default=0.0, ge=0.0, le=0.5)
    degraded_reason: Optional[str] = None

    model_config = {"frozen": True}


class ScoreComparison(BaseModel):
    """Result of comparing two quality scores (b relative to a)."""
    winner: Literal["a", "b", "tie"]
    differences: Dict[str, float] = Field(description="Per-dimension b - a, including overall")
    significance: float = Field(ge=0.0, le=1.0)
    summary: str

    model_config = {"frozen": True}

"""
Rule engine and template output models.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .enums import RuleCategory, TemplateType


class AppliedRule(BaseModel):
    """A rule that changed the text."""
    rule_id: str
    description: str
    category: RuleCategory
    impact: Literal["low", "medium", "high"] = "medium"

    model_config = {"frozen": True}


class Improvement(BaseModel):
    """A before/after record of one change (or a degradation note)."""
    type: str
    before: str = ""
    after: str = ""
    reason: str

    model_config = {"frozen": True}


class RefinementResult(BaseModel):
    """Output of applying a domain rule set to a prompt."""
    refined: str
    rules_applied: List[AppliedRule] = Field(default_factory=list)
    improvements: List[Improvement] = Field(default_factory=list)
    degraded_reason: Optional[str] = None

    model_config = {"frozen": True}


class Example(BaseModel):
    """A before/after example of a refinement."""
    title: str = ""
    before: str
    after: str
    explanation: str

    model_config = {"frozen": True}


class TemplateResult(BaseModel):
    """A rendered prompt template."""
    prompt: str
    system: str
    variables: Dict[str, str] = Field(default_factory=dict)
    type: TemplateType

    model_config = {"frozen": True}

"""
Domain rule engine: rule primitives, built-in domain rule sets, tone
rules and prompt templates.
"""

from .base import (
    DomainRule,
    DomainRuleSet,
    EnhancementRule,
    LiteralMatcher,
    PredicateMatcher,
    RegexMatcher,
    rule_from_dict,
)
from .engine import RuleEngine, degraded_refinement, mask_placeholders, unmask_placeholders
from .templates import needs_template, render_template, select_template_type

__all__ = [
    "DomainRule",
    "DomainRuleSet",
    "EnhancementRule",
    "LiteralMatcher",
    "PredicateMatcher",
    "RegexMatcher",
    "rule_from_dict",
    "RuleEngine",
    "degraded_refinement",
    "mask_placeholders",
    "unmask_placeholders",
    "needs_template",
    "render_template",
    "select_template_type",
]

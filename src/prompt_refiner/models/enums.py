"""
Enumerations shared across the refinement pipeline.
"""

from enum import Enum


class PromptDomain(str, Enum):
    """Subject areas that select rule set, weights and system prompt."""
    SQL = "sql"
    BRANDING = "branding"
    CINE = "cine"
    SAAS = "saas"
    DEVOPS = "devops"
    GENERAL = "general"
    # Extended domains (served by the general rule set)
    MOBILE = "mobile"
    WEB = "web"
    BACKEND = "backend"
    FRONTEND = "frontend"
    AI = "ai"
    GAMING = "gaming"
    CRYPTO = "crypto"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    FINANCE = "finance"
    LEGAL = "legal"


class PromptTone(str, Enum):
    """Target register for the refined prompt."""
    FORMAL = "formal"
    CASUAL = "casual"
    TECHNICAL = "technical"
    CREATIVE = "creative"


class TemplateType(str, Enum):
    """Prompt template families."""
    BASIC = "basic"
    CHAIN_OF_THOUGHT = "chain-of-thought"
    FEW_SHOT = "few-shot"
    ROLE_BASED = "role-based"
    STEP_BY_STEP = "step-by-step"


class RuleCategory(str, Enum):
    """
    Rule categories, declared in application order.

    The rule engine applies categories in exactly this order.
    """
    VAGUE_TERMS = "vague_terms"
    TERMINOLOGY = "terminology"
    STRUCTURE = "structure"
    FORMATTING = "formatting"
    ENHANCEMENT = "enhancement"
    CONTEXT = "context"
    OPTIMIZATION = "optimization"


class IssueSeverity(str, Enum):
    """Severity of a validation error or warning (ordinal)."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueKind(str, Enum):
    """What aspect of the prompt a validation finding is about."""
    EMPTY = "empty"
    LENGTH = "length"
    CLARITY = "clarity"
    SPECIFICITY = "specificity"
    STRUCTURE = "structure"
    COMPLETENESS = "completeness"
    TEMPLATE = "template"
    REDUNDANCY = "redundancy"
    LANGUAGE = "language"
    TERMINOLOGY = "terminology"
    CONTENT = "content"
    ACTIONABILITY = "actionability"

"""
General-purpose rule set plus the rules shared by every domain:
formatting, cross-domain optimization blocks and the final polish.

Extended domains (web, mobile, ai, finance, ...) have no rule set of
their own and are served by GENERAL_RULES.
"""

import re
from typing import List, Optional

from ...models.enums import PromptDomain, RuleCategory
from ...models.refinement import Example
from ..base import DomainRule, DomainRuleSet, EnhancementRule, PredicateMatcher, bullet_block, regex

D = PromptDomain.GENERAL
VAGUE = RuleCategory.VAGUE_TERMS
FORMATTING = RuleCategory.FORMATTING

TERMINAL_PUNCTUATION = (".", "!", "?", ":", ";")


def _first_paragraph(text: str) -> str:
    return text.split("\n\n", 1)[0].rstrip()


def _starts_lowercase(text: str, analysis=None) -> bool:
    stripped = text.lstrip()
    return bool(stripped) and stripped[0].islower()


def _capitalize(text: str) -> str:
    offset = len(text) - len(text.lstrip())
    return text[:offset] + text[offset].upper() + text[offset + 1:]


def _lacks_terminal_period(text: str, analysis=None) -> bool:
    first = _first_paragraph(text)
    return bool(first.strip()) and not first.endswith(TERMINAL_PUNCTUATION)


def _add_terminal_period(text: str) -> str:
    parts = text.split("\n\n", 1)
    parts[0] = parts[0].rstrip() + "."
    return "\n\n".join(parts)


FORMATTING_RULES = [
    DomainRule("format_capitalize", D, PredicateMatcher("starts_lowercase", _starts_lowercase),
               _capitalize, FORMATTING, "Capitalize the first letter", priority=2),
    DomainRule("format_terminal_period", D, PredicateMatcher("lacks_terminal_period", _lacks_terminal_period),
               _add_terminal_period, FORMATTING, "End the first paragraph with a period", priority=1),
]

RULES = [
    DomainRule("general_nice_adjective", D, regex(r"\bbonit[oa]s?\b"),
               "well-designed", VAGUE, "Replace an aesthetic adjective with a quality one", priority=6),
    DomainRule("general_good_adjective", D, regex(r"\bbuen[oa]s?\b"),
               "high-quality", VAGUE, "Replace 'bueno' with a precise quality term", priority=6),
    DomainRule("general_nice", D, regex(r"\bnice\b"),
               "well-crafted", VAGUE, "Replace 'nice' with a precise quality term", priority=5),
    DomainRule("general_cool", D, regex(r"\bcool\b"),
               "impressive", VAGUE, "Replace 'cool' with a precise quality term", priority=5),
]


# ============================================================================
# CROSS-DOMAIN OPTIMIZATION (every domain, after the domain blocks)
# ============================================================================

OPTIMIZATION = RuleCategory.OPTIMIZATION
CONTEXT_RULE_ID = "optimize_caller_context"

CLARIFICATIONS_HEADING = "Please ensure the result includes:"
REQUIREMENTS_HEADING = "Specific requirements:"
FORMAT_HEADING = "Format:"
EXAMPLES_REQUEST = "Please include examples to illustrate the solution."

HINT_CLARIFICATIONS = {
    "sql": ["Proper table structure with appropriate data types", "Indexes and constraints where applicable"],
    "branding": ["Target audience and brand voice", "Key messaging and value propositions"],
    "saas": ["User experience considerations", "Technical architecture requirements"],
}

# hint -> (keywords that already cover it, requirement)
HINT_REQUIREMENTS = {
    "sql": [
        (("constraint",), "Include appropriate constraints and relationships"),
        (("index",), "Consider indexing for performance optimization"),
        (("sample",), "Provide sample data for testing"),
    ],
    "branding": [
        (("audience",), "Define target audience characteristics"),
        (("tone", "voice"), "Specify brand voice and tone guidelines"),
    ],
    "cine": [
        (("format",), "Follow industry-standard screenplay format"),
        (("character",), "Develop well-defined character profiles"),
    ],
}

# (hint or None, words, format line) checked in order
FORMAT_SUGGESTIONS = [
    ("sql", (), "SQL with proper formatting, comments, and examples"),
    ("cine", (), "Industry-standard screenplay format"),
    (None, ("code", "script"), "Well-commented code with clear variable names"),
    (None, ("document", "report"), "Structured document with clear headings and sections"),
]


def _is_ambiguous(text: str, analysis=None) -> bool:
    return analysis is not None and analysis.ambiguity_score > 0.5


def _has_domain_hints(text: str, analysis=None) -> bool:
    return analysis is not None and bool(analysis.domain_hints)


def _is_analyzed(text: str, analysis=None) -> bool:
    return analysis is not None


def _is_complex(text: str, analysis=None) -> bool:
    return analysis is not None and analysis.complexity > 0.6


def _clarifications(text: str, analysis) -> str:
    lines = []
    if analysis.ambiguity_score > 0.7:
        lines += ["Clear and specific requirements", "Well-defined scope and boundaries"]
    for hint in analysis.domain_hints:
        lines += HINT_CLARIFICATIONS.get(hint, [])
    return bullet_block(CLARIFICATIONS_HEADING, lines) if lines else ""


def _requirements(text: str, analysis) -> str:
    lowered = text.lower()
    lines = [
        requirement
        for hint in analysis.domain_hints
        for covered_by, requirement in HINT_REQUIREMENTS.get(hint, [])
        if not any(word in lowered for word in covered_by)
    ]
    return bullet_block(REQUIREMENTS_HEADING, lines) if lines else ""


def _format_line(text: str, analysis) -> str:
    lowered = text.lower()
    if "format" in lowered or "style" in lowered:
        return ""
    for hint, words, suggestion in FORMAT_SUGGESTIONS:
        if (hint and hint in analysis.domain_hints) or any(word in lowered for word in words):
            return f"{FORMAT_HEADING} {suggestion}"
    return ""


def _examples_request(text: str, analysis) -> str:
    return "" if "example" in text.lower() else EXAMPLES_REQUEST


OPTIMIZATION_RULES = [
    EnhancementRule("optimize_clarifications", D, PredicateMatcher("ambiguous", _is_ambiguous),
                    _clarifications, "Add specific requirements to reduce ambiguity",
                    category=OPTIMIZATION, priority=4, heading=CLARIFICATIONS_HEADING),
    EnhancementRule("optimize_domain_requirements", D, PredicateMatcher("has_domain_hints", _has_domain_hints),
                    _requirements, "Add domain-specific technical requirements",
                    category=OPTIMIZATION, priority=3, heading=REQUIREMENTS_HEADING),
    EnhancementRule("optimize_format", D, PredicateMatcher("analyzed", _is_analyzed),
                    _format_line, "Add an output format",
                    category=OPTIMIZATION, priority=2, heading=FORMAT_HEADING),
    EnhancementRule("optimize_examples_request", D, PredicateMatcher("complex", _is_complex),
                    _examples_request, "Ask for examples that illustrate the solution",
                    category=OPTIMIZATION, priority=1, heading=EXAMPLES_REQUEST),
]


def context_rules(context: Optional[str]) -> List[EnhancementRule]:
    """Rule writing the caller's context into the prompt; empty without context."""
    context = " ".join((context or "").split())
    if not context:
        return []
    return [EnhancementRule(
        CONTEXT_RULE_ID, D, PredicateMatcher("always", lambda text, analysis=None: True),
        f"Additional context: {context}", "Add the caller's context to the prompt",
        category=OPTIMIZATION, priority=0,
    )]


def _section_rank(section: str) -> int:
    head = section.lstrip().lower()
    if head.startswith(("specific requirements:", "format:")):
        return 1
    if head.startswith(("additional context:", "note:")):
        return 2
    return 0


def polish(text: str) -> str:
    """
    Tidy refined text: trailing spaces and blank-line runs go, sections
    are ordered request first, then specifications, then context.
    """
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text).strip()
    return "\n\n".join(sorted(text.split("\n\n"), key=_section_rank))


POLISH_RULE = DomainRule(
    "optimize_final_polish", D, PredicateMatcher("needs_polish", lambda text, analysis=None: polish(text) != text),
    polish, OPTIMIZATION, "Clean up whitespace and order sections", priority=0,
)


SYSTEM_PROMPT = (
    "You are a professional assistant with expertise across multiple domains. "
    "Give accurate, well-structured and actionable answers, state your "
    "assumptions and ask for missing details when they matter."
)

COMPLEXITY_NOTE = (
    "Note: This is a complex request. Break the answer into clear sections and "
    "address each requirement explicitly."
)

EXAMPLES = [
    Example(
        title="Informal request",
        before="write a nice summary of this article",
        after="Write a well-crafted summary of this article.",
        explanation="Replaces a vague adjective and fixes capitalization and punctuation.",
    ),
    Example(
        title="Vague praise",
        before="give me some cool ideas for a team offsite",
        after="Give me some impressive ideas for a team offsite.",
        explanation="Replaces 'cool' with a more precise term.",
    ),
]

GENERAL_RULES = DomainRuleSet(
    domain=D,
    description="General-purpose prompts and extended domains without a dedicated rule set",
    rules=RULES,
    weights={"clarity": 0.25, "specificity": 0.25, "structure": 0.25, "completeness": 0.25},
    system_prompt=SYSTEM_PROMPT,
    complexity_note=COMPLEXITY_NOTE,
    examples=EXAMPLES,
    detection_patterns=[
        re.compile(r"\b(improve|enhance|optimi[sz]e|better|good|best)\b", re.IGNORECASE),
    ],
)

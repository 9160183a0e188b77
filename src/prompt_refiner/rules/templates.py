"""
Prompt templates.

Renders the refined prompt into one of five template families. Templates
wrap the refined text; {{var}} placeholders in it are left as they are
and the caller's variables are returned alongside for substitution
downstream.
"""

import re
from typing import Dict, Optional

from ..models.analysis import AnalysisResult
from ..models.enums import TemplateType
from ..models.refinement import TemplateResult

REPEATED_VOCABULARY = [
    re.compile(r"\b(table|database|schema)s?\b", re.IGNORECASE),
    re.compile(r"\b(user|customer|client)s?\b", re.IGNORECASE),
    re.compile(r"\b(component|module|function)s?\b", re.IGNORECASE),
]

STEP_PATTERN = re.compile(r"\b(step|guide|how\s+to|tutorial)s?\b", re.IGNORECASE)
ROLE_PATTERN = re.compile(r"\b(as\s+an?|you\s+are|expert|professional)\b", re.IGNORECASE)
REASONING_PATTERN = re.compile(r"\b(analy[sz]e|explain|reasoning|think\s+through)\b", re.IGNORECASE)

DEFAULT_ROLE = "professional expert"


def needs_template(text: str, analysis: AnalysisResult, variables: Optional[Dict[str, str]] = None) -> bool:
    """
    Decide whether a template should be rendered.

    True when variables are supplied, complexity > 0.7, more than one
    domain hint is present, or entity vocabulary repeats.
    """
    if variables:
        return True
    if analysis.complexity > 0.7 or len(analysis.domain_hints) > 1:
        return True
    return any(len(pattern.findall(text)) > 1 for pattern in REPEATED_VOCABULARY)


def select_template_type(text: str, variables: Optional[Dict[str, str]] = None) -> TemplateType:
    """Pick the template family from wording and variable names."""
    if STEP_PATTERN.search(text):
        return TemplateType.STEP_BY_STEP
    if ROLE_PATTERN.search(text):
        return TemplateType.ROLE_BASED
    if REASONING_PATTERN.search(text):
        return TemplateType.CHAIN_OF_THOUGHT
    if variables and any(key.lower() in ("examples", "samples") for key in variables):
        return TemplateType.FEW_SHOT
    return TemplateType.BASIC


def _lower_first(text: str) -> str:
    return text[:1].lower() + text[1:] if text[:1].isupper() and not text[1:2].isupper() else text


def _render_prompt(prompt: str, template_type: TemplateType, variables: Dict[str, str]) -> str:
    if template_type == TemplateType.CHAIN_OF_THOUGHT:
        return (
            f"{prompt}\n\n"
            "Let's approach this step-by-step:\n"
            "1. First, identify the key requirements and constraints\n"
            "2. Then, reason through the possible approaches and their trade-offs\n"
            "3. Finally, present the recommended solution and explain why"
        )
    if template_type == TemplateType.FEW_SHOT:
        examples = next(
            (value for key, value in variables.items() if key.lower() in ("examples", "samples")),
            "",
        )
        return (
            f"{prompt}\n\n"
            f"Examples:\n{examples}\n\n"
            "Follow the pattern shown in the examples above."
        )
    if template_type == TemplateType.ROLE_BASED:
        role = variables.get("role", DEFAULT_ROLE)
        return (
            f"As a {role}, {_lower_first(prompt)}\n\n"
            "Draw on your professional experience and explain your recommendations."
        )
    if template_type == TemplateType.STEP_BY_STEP:
        return (
            f"{prompt}\n\n"
            "Structure the response as numbered steps. For each step, state the action, "
            "the expected result and any prerequisites."
        )
    return f"{prompt}\n\nProvide a clear, complete and well-structured response."


def render_template(
    prompt: str,
    system_prompt: str,
    domain_label: str,
    template_type: TemplateType,
    variables: Optional[Dict[str, str]] = None,
) -> TemplateResult:
    """
    Render prompt into a template of the given type.

    Args:
        prompt: Refined prompt text
        system_prompt: Domain system prompt
        domain_label: Domain value appended as a focus line
        template_type: Template family
        variables: Caller variables (returned unmodified)

    Returns:
        TemplateResult
    """
    variables = dict(variables or {})
    return TemplateResult(
        prompt=_render_prompt(prompt, template_type, variables),
        system=f"{system_prompt}\n\nFocus on {domain_label} best practices and industry standards.",
        variables=variables,
        type=template_type,
    )

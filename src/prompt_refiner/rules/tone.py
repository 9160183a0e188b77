"""
Tone adjustment rules.

Each tone is one rewrite rule (``tone_<tone>_adjustment``) whose regex
alternation covers a fixed word list; the callable replacement looks the
matched phrase up in that list.
"""

import re
from typing import Dict, List, Optional

from ..models.enums import PromptDomain, PromptTone, RuleCategory
from .base import DomainRule, RegexMatcher

TONE_REPLACEMENTS: Dict[PromptTone, Dict[str, str]] = {
    PromptTone.FORMAL: {
        "hi": "Greetings",
        "hey": "Hello",
        "okay": "acceptable",
        "guys": "team",
    },
    PromptTone.CASUAL: {
        "i would like to request": "I need",
        "please generate": "Create",
        "kindly": "",
    },
    PromptTone.TECHNICAL: {
        "make": "implement",
        "build": "develop",
        "fix": "resolve",
    },
    PromptTone.CREATIVE: {
        "implement": "craft",
        "generate": "create",
        "develop": "design",
    },
}


def _phrase_pattern(phrase: str) -> str:
    words = [re.escape(word) for word in phrase.split()]
    return r"\s+".join(words)


def _replacer(table: Dict[str, str]):
    def replace(match: re.Match) -> str:
        key = " ".join(match.group(1).lower().split())
        replacement = table[key]
        return replacement + match.group(2) if replacement else ""
    return replace


def build_tone_rule(tone: PromptTone) -> DomainRule:
    """
    Build the rewrite rule for one tone.

    Phrases are matched case-insensitively as whole words. A phrase that
    maps to "" is removed together with its trailing whitespace.
    """
    table = TONE_REPLACEMENTS[tone]
    # Longest phrases first so multi-word entries win over their prefixes
    alternation = "|".join(_phrase_pattern(p) for p in sorted(table, key=len, reverse=True))
    return DomainRule(
        id=f"tone_{tone.value}_adjustment",
        domain=PromptDomain.GENERAL,
        matcher=RegexMatcher(pattern=rf"\b({alternation})\b(\s*)"),
        replacement=_replacer(table),
        category=RuleCategory.TERMINOLOGY,
        description=f"Adjust wording to a {tone.value} tone",
        priority=1,
    )


TONE_RULES: Dict[PromptTone, DomainRule] = {tone: build_tone_rule(tone) for tone in PromptTone}


def tone_rules(tone: Optional[PromptTone]) -> List[DomainRule]:
    """Rules for a tone; empty when no tone was requested."""
    if tone is None:
        return []
    return [TONE_RULES[PromptTone(tone)]]

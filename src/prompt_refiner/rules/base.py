"""
Rule primitives for the domain rule engine.

A rule is a pure step (text, analysis) -> text. Matchers are a tagged union:
- LiteralMatcher: substring (case-insensitive by default)
- RegexMatcher: regular expression source + flags
- PredicateMatcher: function of (text, analysis)

Literal and regex matchers (and therefore rules built on them) are
serializable, which is what custom user-authored rules rely on.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..models.analysis import AnalysisResult
from ..models.enums import PromptDomain, RuleCategory
from ..models.refinement import Example

Replacement = Union[str, Callable[[re.Match], str]]

CATEGORY_IMPACT = {
    RuleCategory.VAGUE_TERMS: "high",
    RuleCategory.TERMINOLOGY: "medium",
    RuleCategory.STRUCTURE: "medium",
    RuleCategory.FORMATTING: "low",
    RuleCategory.ENHANCEMENT: "medium",
    RuleCategory.CONTEXT: "low",
    RuleCategory.OPTIMIZATION: "medium",
}


# ============================================================================
# MATCHERS
# ============================================================================

@dataclass(frozen=True)
class LiteralMatcher:
    """Plain substring matcher."""
    value: str
    case_sensitive: bool = False
    kind: str = field(default="literal", init=False)

    def _regex(self) -> re.Pattern:
        return re.compile(re.escape(self.value), 0 if self.case_sensitive else re.IGNORECASE)

    def matches(self, text: str, analysis: Optional[AnalysisResult] = None) -> bool:
        if self.case_sensitive:
            return self.value in text
        return self.value.lower() in text.lower()

    def search(self, text: str) -> Optional[re.Match]:
        return self._regex().search(text)

    def sub(self, text: str, replacement: Replacement) -> Tuple[str, int]:
        repl = replacement if callable(replacement) else (lambda _m: replacement)
        return self._regex().subn(repl, text)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "value": self.value, "case_sensitive": self.case_sensitive}


@dataclass(frozen=True)
class RegexMatcher:
    """
    Regular-expression matcher.

    ignore_case defaults to True; ^ anchors the start of the whole text
    unless multiline is set.
    """
    pattern: str
    ignore_case: bool = True
    multiline: bool = False
    kind: str = field(default="regex", init=False)
    compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        flags = (re.IGNORECASE if self.ignore_case else 0) | (re.MULTILINE if self.multiline else 0)
        object.__setattr__(self, "compiled", re.compile(self.pattern, flags))

    def matches(self, text: str, analysis: Optional[AnalysisResult] = None) -> bool:
        return self.compiled.search(text) is not None

    def search(self, text: str) -> Optional[re.Match]:
        return self.compiled.search(text)

    def sub(self, text: str, replacement: Replacement) -> Tuple[str, int]:
        if callable(replacement):
            return self.compiled.subn(replacement, text)
        # Literal replacement text; group references are not expanded
        return self.compiled.subn(lambda _m: replacement, text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "pattern": self.pattern,
            "ignore_case": self.ignore_case,
            "multiline": self.multiline,
        }


@dataclass(frozen=True)
class PredicateMatcher:
    """Matcher backed by a function of (text, analysis); not serializable."""
    name: str
    predicate: Callable[[str, Optional[AnalysisResult]], bool] = field(compare=False)
    kind: str = field(default="predicate", init=False)

    def matches(self, text: str, analysis: Optional[AnalysisResult] = None) -> bool:
        return bool(self.predicate(text, analysis))

    def to_dict(self) -> Dict[str, Any]:
        raise TypeError(f"Predicate matcher '{self.name}' cannot be serialized")


Matcher = Union[LiteralMatcher, RegexMatcher, PredicateMatcher]


def regex(pattern: str, ignore_case: bool = True) -> RegexMatcher:
    """Shorthand used by the domain rule tables."""
    return RegexMatcher(pattern=pattern, ignore_case=ignore_case)


def matcher_from_dict(data: Dict[str, Any]) -> Matcher:
    """
    Rebuild a serializable matcher.

    Raises:
        ValueError: For unknown or non-serializable kinds
    """
    kind = data.get("kind")
    if kind == "literal":
        return LiteralMatcher(value=data["value"], case_sensitive=data.get("case_sensitive", False))
    if kind == "regex":
        return RegexMatcher(
            pattern=data["pattern"],
            ignore_case=data.get("ignore_case", True),
            multiline=data.get("multiline", False),
        )
    raise ValueError(f"Unsupported matcher kind: {kind!r}")


# ============================================================================
# RULES
# ============================================================================

@dataclass(frozen=True)
class RuleOutcome:
    """What one rule did to the text."""
    text: str
    changed: bool
    before: str = ""
    after: str = ""


def _snippet(text: str, start: int, end: int, pad: int = 20) -> str:
    return text[max(0, start - pad): end + pad].strip()


@dataclass(frozen=True)
class DomainRule:
    """
    Pattern -> replacement rewrite rule.

    Literal/regex matchers substitute every match. A predicate matcher
    requires a callable replacement that receives the whole text.
    """
    id: str
    domain: PromptDomain
    matcher: Matcher
    replacement: Union[Replacement, Callable[[str], str]]
    category: RuleCategory
    description: str
    priority: int = 5
    active: bool = True
    examples: Tuple[Example, ...] = ()

    @property
    def impact(self) -> str:
        return CATEGORY_IMPACT[self.category]

    def apply(self, text: str, analysis: Optional[AnalysisResult] = None) -> RuleOutcome:
        """
        Apply the rule once to text.

        Returns:
            RuleOutcome; changed is False when nothing matched
        """
        if not self.active or not self.matcher.matches(text, analysis):
            return RuleOutcome(text=text, changed=False)

        if isinstance(self.matcher, PredicateMatcher):
            new_text = self.replacement(text)
        else:
            first = self.matcher.search(text)
            new_text, count = self.matcher.sub(text, self.replacement)
            if count == 0 or new_text == text:
                return RuleOutcome(text=text, changed=False)
            before = _snippet(text, first.start(), first.end())
            return RuleOutcome(
                text=new_text,
                changed=True,
                before=before,
                after=_snippet(new_text, first.start(), first.end() + len(new_text) - len(text)),
            )

        return RuleOutcome(text=new_text, changed=new_text != text, before=text[:60], after=new_text[:60])

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize a rule with a literal replacement.

        Raises:
            TypeError: For predicate matchers or callable replacements
        """
        if callable(self.replacement):
            raise TypeError(f"Rule '{self.id}' has a callable replacement and cannot be serialized")
        return {
            "type": "rewrite",
            "id": self.id,
            "domain": self.domain.value,
            "matcher": self.matcher.to_dict(),
            "replacement": self.replacement,
            "category": self.category.value,
            "description": self.description,
            "priority": self.priority,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainRule":
        """Rebuild a serialized rewrite rule (custom rules)."""
        return cls(
            id=data["id"],
            domain=PromptDomain(data.get("domain", PromptDomain.GENERAL.value)),
            matcher=matcher_from_dict(data["matcher"]),
            replacement=data["replacement"],
            category=RuleCategory(data.get("category", RuleCategory.VAGUE_TERMS.value)),
            description=data.get("description", data["id"]),
            priority=int(data.get("priority", 5)),
            active=bool(data.get("active", True)),
        )


BlockRenderer = Callable[[str, Optional[AnalysisResult]], str]


@dataclass(frozen=True)
class EnhancementRule:
    """
    Trigger-gated additive block.

    Appends block when trigger matches, guard (the "already covered"
    check) does not, and the marker is not already present.
    Trigger and guard are evaluated against subject when given (the
    engine passes the text as it stood before any block was appended),
    so one block never triggers another. Never removes content;
    re-application is a no-op.

    block is either fixed text or a renderer called with the current
    text and the analysis; a renderer returning "" appends nothing.
    Rendered blocks need a heading, which is then the marker.
    """
    id: str
    domain: PromptDomain
    trigger: Matcher
    block: Union[str, BlockRenderer]
    description: str
    guard: Optional[Matcher] = None
    category: RuleCategory = RuleCategory.ENHANCEMENT
    priority: int = 5
    active: bool = True
    heading: Optional[str] = None

    def __post_init__(self):
        if callable(self.block) and not self.heading:
            raise ValueError(f"Enhancement '{self.id}' renders its block and needs a heading")

    @property
    def marker(self) -> str:
        if self.heading:
            return self.heading
        return self.block.split("\n", 1)[0]

    @property
    def impact(self) -> str:
        return CATEGORY_IMPACT[self.category]

    def applies(
        self, text: str, analysis: Optional[AnalysisResult] = None, subject: Optional[str] = None
    ) -> bool:
        if not self.active or self.marker in text:
            return False
        subject = text if subject is None else subject
        if not self.trigger.matches(subject, analysis):
            return False
        return self.guard is None or not self.guard.matches(subject, analysis)

    def render(self, text: str, analysis: Optional[AnalysisResult] = None) -> str:
        if callable(self.block):
            return self.block(text, analysis)
        return self.block

    def apply(
        self, text: str, analysis: Optional[AnalysisResult] = None, subject: Optional[str] = None
    ) -> RuleOutcome:
        if not self.applies(text, analysis, subject):
            return RuleOutcome(text=text, changed=False)
        block = self.render(text, analysis)
        if not block:
            return RuleOutcome(text=text, changed=False)
        return RuleOutcome(
            text=f"{text.rstrip()}\n\n{block}",
            changed=True,
            before="",
            after=self.marker,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize a rule with a fixed block.

        Raises:
            TypeError: For rendered blocks or predicate matchers
        """
        if callable(self.block):
            raise TypeError(f"Enhancement '{self.id}' renders its block and cannot be serialized")
        data = {
            "type": "enhancement",
            "id": self.id,
            "domain": self.domain.value,
            "trigger": self.trigger.to_dict(),
            "block": self.block,
            "category": self.category.value,
            "description": self.description,
            "priority": self.priority,
            "active": self.active,
        }
        if self.guard is not None:
            data["guard"] = self.guard.to_dict()
        if self.heading:
            data["heading"] = self.heading
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnhancementRule":
        guard = data.get("guard")
        return cls(
            id=data["id"],
            domain=PromptDomain(data.get("domain", PromptDomain.GENERAL.value)),
            trigger=matcher_from_dict(data["trigger"]),
            block=data["block"],
            description=data.get("description", data["id"]),
            guard=matcher_from_dict(guard) if guard else None,
            category=RuleCategory(data.get("category", RuleCategory.ENHANCEMENT.value)),
            priority=int(data.get("priority", 5)),
            active=bool(data.get("active", True)),
            heading=data.get("heading"),
        )


Rule = Union[DomainRule, EnhancementRule]


def rule_from_dict(data: Dict[str, Any]) -> Rule:
    """Rebuild a serialized rule of either type."""
    if data.get("type") == "enhancement":
        return EnhancementRule.from_dict(data)
    return DomainRule.from_dict(data)


def bullet_block(heading: str, lines: List[str]) -> str:
    """Render a heading followed by "- " bullet lines."""
    return heading + "\n" + "\n".join(f"- {line}" for line in lines)


# ============================================================================
# DOMAIN RULE SET
# ============================================================================

@dataclass
class DomainRuleSet:
    """
    Static configuration of one domain.

    Attributes:
        domain: Domain served
        description: Human readable scope
        rules: Rewrite and enhancement rules in declaration order
        weights: Quality weights (clarity, specificity, structure, completeness)
        system_prompt: Expert persona text
        complexity_note: Appended when analysis.complexity > 0.7
        focus_terms: Words whose presence (technical terms, hints or tokens)
            appends focus_clause
        focus_clause: Domain focus sentence
        examples: Before/after examples
        detection_patterns: Regexes used by domain detection
    """
    domain: PromptDomain
    description: str
    rules: List[Rule]
    weights: Dict[str, float]
    system_prompt: str
    complexity_note: str = ""
    focus_terms: frozenset = frozenset()
    focus_clause: str = ""
    examples: List[Example] = field(default_factory=list)
    detection_patterns: List[re.Pattern] = field(default_factory=list)

    def build_system_prompt(
        self, analysis: Optional[AnalysisResult] = None, context: Optional[str] = None
    ) -> str:
        """
        Domain system prompt with at most one appended clause.

        Precedence: caller context, then complexity note (> 0.7), then
        the domain focus clause.
        """
        if context:
            return f"{self.system_prompt}\n\nAdditional Context: {context}"
        if analysis is not None and analysis.complexity > 0.7 and self.complexity_note:
            return f"{self.system_prompt}\n\n{self.complexity_note}"
        if analysis is not None and self.focus_clause and self._has_focus(analysis):
            return f"{self.system_prompt}\n\n{self.focus_clause}"
        return self.system_prompt

    def _has_focus(self, analysis: AnalysisResult) -> bool:
        seen = {t.lower() for t in analysis.technical_terms}
        seen.update(h.lower() for h in analysis.domain_hints)
        seen.update(t.text.lower() for t in analysis.tokens)
        return bool(seen & self.focus_terms)

"""
Domain rule engine.

Applies a domain's rules as an explicit fold over an ordered rule list:
- Rewrite phase: vague_terms, terminology, structure, formatting
  (each category in turn, descending priority, then declaration order)
- Optional tone pass
- Additive phase: enhancement blocks, context (industry/genre) blocks,
  cross-domain optimization blocks, then the caller's context
- Final polish: whitespace cleanup and section order

{{var}} placeholders are masked for the duration of the fold so that no
rule can rewrite them.
"""

import re
from functools import reduce
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

import structlog

from ..exceptions import InputError, RuleEngineError
from ..models.analysis import AnalysisResult
from ..models.enums import PromptDomain, PromptTone, RuleCategory
from ..models.refinement import AppliedRule, Example, Improvement, RefinementResult
from .base import DomainRule, DomainRuleSet, EnhancementRule, Rule, rule_from_dict
from .domains import (
    CONTEXT_RULE_ID,
    DOMAIN_RULE_SETS,
    FORMATTING_RULES,
    OPTIMIZATION_RULES,
    POLISH_RULE,
    context_rules,
)
from .tone import TONE_RULES, tone_rules

logger = structlog.get_logger(__name__)

CATEGORY_ORDER = {category: index for index, category in enumerate(RuleCategory)}
ADDITIVE_CATEGORIES = (RuleCategory.ENHANCEMENT, RuleCategory.CONTEXT, RuleCategory.OPTIMIZATION)

PLACEHOLDER_PATTERN = re.compile(r"\{\{[^{}]*\}\}")
_MASK_OPEN = "\ue000"
_MASK_CLOSE = "\ue001"
_MASK_PATTERN = re.compile(f"{_MASK_OPEN}(\\d+){_MASK_CLOSE}")

MAX_EXAMPLES = 2


# ============================================================================
# PLACEHOLDER MASKING
# ============================================================================

def mask_placeholders(text: str) -> Tuple[str, List[str]]:
    """Replace {{var}} placeholders with private-use sentinels."""
    found: List[str] = []

    def _mask(match: re.Match) -> str:
        found.append(match.group(0))
        return f"{_MASK_OPEN}{len(found) - 1}{_MASK_CLOSE}"

    return PLACEHOLDER_PATTERN.sub(_mask, text), found


def unmask_placeholders(text: str, placeholders: List[str]) -> str:
    """Inverse of mask_placeholders."""
    if not placeholders:
        return text
    return _MASK_PATTERN.sub(lambda m: placeholders[int(m.group(1))], text)


# ============================================================================
# FOLD STATE
# ============================================================================

class _Fold(NamedTuple):
    text: str
    applied: Tuple[AppliedRule, ...] = ()
    improvements: Tuple[Improvement, ...] = ()


def degraded_refinement(text: str, error: Exception) -> RefinementResult:
    """
    Refinement result used when the engine fails.

    Returns the original text unchanged with an improvement entry that
    describes the failure.
    """
    reason = f"rule_engine_failed: {error}"
    return RefinementResult(
        refined=text,
        rules_applied=[],
        improvements=[Improvement(type="degraded", before=text[:60], after=text[:60], reason=reason)],
        degraded_reason=reason,
    )


class RuleEngine:
    """
    Applies per-domain rule sets, tone rules and custom rules.

    Built-in rule sets are shared read-only data; activation overrides
    and custom rules are per engine instance.
    """

    def __init__(self, rule_sets: Optional[Dict[PromptDomain, DomainRuleSet]] = None):
        """
        Args:
            rule_sets: Rule sets by domain (defaults to the built-in sets)
        """
        self.rule_sets = dict(rule_sets or DOMAIN_RULE_SETS)
        self._custom_rules: List[Rule] = []
        self._active_overrides: Dict[str, bool] = {}
        self.logger = logger.bind(component="rule_engine")

    # ------------------------------------------------------------------
    # Rule selection
    # ------------------------------------------------------------------

    def rule_set(self, domain: Union[PromptDomain, str]) -> DomainRuleSet:
        """Rule set for a domain; extended domains fall back to general."""
        domain = PromptDomain(domain)
        return self.rule_sets.get(domain, self.rule_sets[PromptDomain.GENERAL])

    def is_active(self, rule: Rule) -> bool:
        return self._active_overrides.get(rule.id, rule.active)

    def ordered_rules(self, domain: Union[PromptDomain, str]) -> List[Rule]:
        """
        Rules of a domain in application order (tone excluded).

        Sort key: category order, descending priority, declaration index.
        """
        rule_set = self.rule_set(domain)
        declared = list(rule_set.rules) + list(FORMATTING_RULES) + list(OPTIMIZATION_RULES)
        declared += [rule for rule in self._custom_rules if rule.domain == rule_set.domain]
        indexed = sorted(
            enumerate(declared),
            key=lambda item: (CATEGORY_ORDER[item[1].category], -item[1].priority, item[0]),
        )
        return [rule for _, rule in indexed]

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def _step(
        self,
        fold: _Fold,
        rule: Rule,
        analysis: Optional[AnalysisResult],
        subject: Optional[str] = None,
    ) -> _Fold:
        if not self.is_active(rule):
            return fold

        try:
            if isinstance(rule, EnhancementRule):
                outcome = rule.apply(fold.text, analysis, subject=subject)
            else:
                outcome = rule.apply(fold.text, analysis)
        except Exception as e:
            raise RuleEngineError(f"Rule '{rule.id}' failed: {e}") from e

        if not outcome.changed:
            return fold

        applied = AppliedRule(
            rule_id=rule.id,
            description=rule.description,
            category=rule.category,
            impact=rule.impact,
        )
        improvement = Improvement(
            type=rule.category.value,
            before=outcome.before,
            after=outcome.after,
            reason=rule.description,
        )
        return _Fold(
            text=outcome.text,
            applied=fold.applied + (applied,),
            improvements=fold.improvements + (improvement,),
        )

    def apply_rules(
        self,
        text: str,
        domain: Union[PromptDomain, str],
        analysis: Optional[AnalysisResult] = None,
        tone: Optional[Union[PromptTone, str]] = None,
        context: Optional[str] = None,
    ) -> RefinementResult:
        """
        Refine text with the domain's rules.

        Args:
            text: Prompt text (normalized, line structure kept)
            domain: Target domain
            analysis: Analysis of the original text (used by predicate rules
                and the optimization blocks; without it those blocks are skipped)
            tone: Optional tone pass applied after formatting
            context: Optional caller context written into the prompt

        Returns:
            RefinementResult with applied rules and before/after records

        Raises:
            RuleEngineError: If a rule raises; callers degrade with
                degraded_refinement()
        """
        masked, placeholders = mask_placeholders(text)
        ordered = self.ordered_rules(domain)
        rewrites = [r for r in ordered if r.category not in ADDITIVE_CATEGORIES]
        additive = [r for r in ordered if r.category in ADDITIVE_CATEGORIES]
        additive += context_rules(context) + [POLISH_RULE]
        rewrites += tone_rules(PromptTone(tone) if tone else None)

        rewritten = reduce(lambda fold, rule: self._step(fold, rule, analysis), rewrites, _Fold(masked))
        # Block triggers see the rewritten user text, never other blocks
        final = reduce(
            lambda fold, rule: self._step(fold, rule, analysis, subject=rewritten.text),
            additive,
            rewritten,
        )

        improvements = [
            imp.model_copy(update={
                "before": unmask_placeholders(imp.before, placeholders),
                "after": unmask_placeholders(imp.after, placeholders),
            })
            for imp in final.improvements
        ]

        self.logger.debug(
            "rules_applied",
            domain=PromptDomain(domain).value,
            tone=PromptTone(tone).value if tone else None,
            rules_applied=len(final.applied),
        )

        return RefinementResult(
            refined=unmask_placeholders(final.text, placeholders),
            rules_applied=list(final.applied),
            improvements=improvements,
        )

    # ------------------------------------------------------------------
    # Domain configuration
    # ------------------------------------------------------------------

    def system_prompt(
        self,
        domain: Union[PromptDomain, str],
        analysis: Optional[AnalysisResult] = None,
        context: Optional[str] = None,
    ) -> str:
        """Domain system prompt with context, complexity or focus clause."""
        return self.rule_set(domain).build_system_prompt(analysis, context)

    def examples(self, domain: Union[PromptDomain, str], limit: int = MAX_EXAMPLES) -> List[Example]:
        """Before/after examples of a domain."""
        return list(self.rule_set(domain).examples[:limit])

    def quality_weights(self, domain: Union[PromptDomain, str]) -> Dict[str, float]:
        """Quality weights of a domain (clarity, specificity, structure, completeness)."""
        return dict(self.rule_set(domain).weights)

    def detect_domain(self, text: str, analysis: Optional[AnalysisResult] = None) -> PromptDomain:
        """
        Guess the domain of a prompt.

        Each detection pattern scores 2 per match and each analyzer domain
        hint 3. The best domain wins with a score of at least 2; ties go to
        the first declared domain. Otherwise general.
        """
        hints = set(analysis.domain_hints) if analysis is not None else set()
        best_domain, best_score = PromptDomain.GENERAL, 0
        for domain, rule_set in self.rule_sets.items():
            if domain == PromptDomain.GENERAL:
                continue
            score = sum(2 * len(pattern.findall(text)) for pattern in rule_set.detection_patterns)
            if domain.value in hints:
                score += 3
            if score > best_score:
                best_domain, best_score = domain, score

        return best_domain if best_score >= 2 else PromptDomain.GENERAL

    def statistics(self) -> Dict[str, Dict[str, Any]]:
        """Per-domain rule, pattern and example counts."""
        stats = {}
        for domain, rule_set in self.rule_sets.items():
            custom = [rule for rule in self._custom_rules if rule.domain == domain]
            stats[domain.value] = {
                "rule_count": len(rule_set.rules) + len(custom),
                "pattern_count": len(rule_set.detection_patterns),
                "example_count": len(rule_set.examples),
                "description": rule_set.description,
            }
        return stats

    # ------------------------------------------------------------------
    # Custom rules
    # ------------------------------------------------------------------

    def _known_rule_ids(self) -> set:
        ids = {rule.id for rule_set in self.rule_sets.values() for rule in rule_set.rules}
        ids.update(rule.id for rule in FORMATTING_RULES + OPTIMIZATION_RULES + [POLISH_RULE])
        ids.add(CONTEXT_RULE_ID)
        ids.update(rule.id for rule in TONE_RULES.values())
        ids.update(rule.id for rule in self._custom_rules)
        return ids

    def add_custom_rule(self, rule: Union[Rule, Dict[str, Any]]) -> Rule:
        """
        Register a user-authored rule.

        Args:
            rule: DomainRule/EnhancementRule or its serialized dict

        Returns:
            The registered rule

        Raises:
            InputError: On malformed definitions or duplicate ids
        """
        if isinstance(rule, dict):
            try:
                rule = rule_from_dict(rule)
            except (KeyError, ValueError, re.error) as e:
                raise InputError(f"Invalid custom rule: {e}") from e

        if not isinstance(rule, (DomainRule, EnhancementRule)):
            raise InputError(f"Unsupported rule type: {type(rule).__name__}")
        if rule.id in self._known_rule_ids():
            raise InputError(f"Rule id already exists: {rule.id}")

        self._custom_rules.append(rule)
        self.logger.info("custom_rule_added", rule_id=rule.id, domain=rule.domain.value)
        return rule

    def set_rule_active(self, rule_id: str, active: bool) -> bool:
        """
        Activate or deactivate a rule by id.

        Returns:
            False if no rule has that id
        """
        if rule_id not in self._known_rule_ids():
            return False
        self._active_overrides[rule_id] = active
        self.logger.info("rule_activation_changed", rule_id=rule_id, active=active)
        return True

    @property
    def custom_rules(self) -> List[Rule]:
        return list(self._custom_rules)

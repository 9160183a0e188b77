"""
Surface text signals shared by the validator and the scorer.

Each helper is a pure predicate or count over the prompt text. The
validator and the scorer weigh these signals differently; the detectors
themselves live here so both read the text the same way.
"""

import re
from typing import List

from .lexicons import ENGLISH_FUNCTION_WORDS, SPANISH_FUNCTION_WORDS

ACTION_VERBS = [
    "create", "generate", "make", "build", "write", "develop", "design", "implement",
    "analyze", "review", "evaluate", "assess", "check", "examine",
    "update", "modify", "change", "improve", "enhance", "optimize", "refactor",
    "explain", "describe", "show", "demonstrate",
]
ACTION_VERB_RE = re.compile(r"\b(" + "|".join(ACTION_VERBS) + r")\b", re.IGNORECASE)

VAGUE_REPLACEMENTS = {
    "bonito": "well-formatted",
    "bonita": "professional",
    "bueno": "high-quality",
    "malo": "problematic",
    "good": "effective",
    "bad": "ineffective",
    "nice": "well-designed",
    "thing": "element",
    "stuff": "components",
    "some": "specific",
    "many": "multiple",
}

# Scorer vocabulary (counted on whitespace-split words)
SCORER_VAGUE_TERMS = [
    "good", "bad", "nice", "cool", "awesome", "great",
    "bonito", "bonita", "bueno", "malo",
    "stuff", "things", "something", "anything",
    "big", "small", "fast", "slow", "easy", "hard",
]

SPECIFIC_DETAILS_RE = re.compile(r"\b(\d+|specific|particular|exact|precise)\b|[#$%]", re.IGNORECASE)
REQUIREMENTS_RE = re.compile(
    r"\b(must|should|require[ds]?|need[s]?|constraints?|requirements?|specifications?)\b", re.IGNORECASE
)
CONSTRAINTS_RE = re.compile(r"\b(must|should|require|need|constraint|limit|within)\b", re.IGNORECASE)
EXAMPLES_RE = re.compile(r"\b(example|sample|instance|demonstrate|illustrate|show)s?\b", re.IGNORECASE)
GENERIC_RE = re.compile(r"\b(generic|general|basic|simple|standard|normal)\b", re.IGNORECASE)
LOGICAL_FLOW_RE = re.compile(
    r"\b(then|next|after|before|because|so|therefore|however|first|second|finally)\b", re.IGNORECASE
)
EXPECTED_OUTPUT_RE = re.compile(
    r"\b(output|result|return|format|deliver|produce|generate|provide|expect)s?\b", re.IGNORECASE
)
DELIVERABLES_RE = re.compile(r"\b(deliver|provide|create|generate|produce|build)\b", re.IGNORECASE)
MEASURABLE_RE = re.compile(r"\b(\d+|measure|metric|criteria|success|complete)\b", re.IGNORECASE)
ABSTRACT_RE = re.compile(r"\b(concept|idea|notion|abstract|theoretical)\b", re.IGNORECASE)
CONFLICT_RE = re.compile(r"\b(simple\b.*\bcomplex|fast\b.*\bslow|big\b.*\bsmall)\b", re.IGNORECASE | re.DOTALL)
STRUCTURED_CONTENT_RE = re.compile(r"^\s*([-*•]|\d+\.)\s|\n\s*\n", re.MULTILINE)
TRAILING_CLAUSE_RE = re.compile(
    r"(\b(that|which|and|or|the|to|with|for|of)|\.\.\.|…)\s*$", re.IGNORECASE
)
OFFENSIVE_RE = re.compile(r"\b(hate|kill|destroy|attack|harm)\s+\w+\b", re.IGNORECASE)
NOSQL_RE = re.compile(r"\b(mongodb|document\s+store|collections?|nosql)\b", re.IGNORECASE)
FORMAT_KEYWORDS = ("format", "style", "structure", "layout")

TERMINOLOGY_GROUPS = [
    ("user", "client", "customer"),
    ("table", "database", "db"),
]

REPEATABLE_ENTITY_PATTERNS = [
    re.compile(r"\b(user|customer|client|person|entity)\b", re.IGNORECASE),
    re.compile(r"\b(table|database|schema)\b", re.IGNORECASE),
    re.compile(r"\b(component|module|function|class)\b", re.IGNORECASE),
]

SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def has_action_verb(text: str) -> bool:
    return ACTION_VERB_RE.search(text) is not None


def has_good_grammar(text: str) -> bool:
    """Starts with a capital letter and ends with terminal punctuation."""
    stripped = text.strip()
    return bool(stripped) and stripped[0].isupper() and stripped[-1] in ".!?"


def has_terminal_punctuation(text: str) -> bool:
    stripped = text.strip()
    return bool(stripped) and stripped[-1] in ".!?"


def has_run_on_sentence(text: str, max_words: int = 25) -> bool:
    return any(len(sentence.split()) > max_words for sentence in SENTENCE_SPLIT_RE.split(text))


def length_score(length: int, upper: int = 800) -> float:
    """Peak at 100-300 characters; upper bounds the 0.6 band."""
    if 100 <= length <= 300:
        return 1.0
    if 50 <= length <= 500:
        return 0.8
    if 20 <= length <= upper:
        return 0.6
    return 0.4


def find_vague_terms(text: str) -> List[str]:
    """Vague terms present in text, in VAGUE_REPLACEMENTS order."""
    return [
        term for term in VAGUE_REPLACEMENTS
        if re.search(rf"\b{term}\b", text, re.IGNORECASE)
    ]


def count_scorer_vague_terms(text: str) -> int:
    words = set(text.lower().split())
    return sum(1 for term in SCORER_VAGUE_TERMS if term in words)


def has_mixed_languages(text: str, minimum: int = 2) -> bool:
    """Both Spanish and English function words occur at least minimum times."""
    spanish = len(SPANISH_FUNCTION_WORDS.findall(text))
    english = len(ENGLISH_FUNCTION_WORDS.findall(text))
    return spanish >= minimum and english >= minimum


def has_inconsistent_terminology(text: str) -> bool:
    lowered = text.lower()
    return any(
        sum(1 for term in group if re.search(rf"\b{term}\b", lowered)) > 1
        for group in TERMINOLOGY_GROUPS
    )


def could_use_variables(text: str) -> bool:
    return any(len(pattern.findall(text)) > 1 for pattern in REPEATABLE_ENTITY_PATTERNS)


def ends_mid_clause(text: str) -> bool:
    return TRAILING_CLAUSE_RE.search(text.strip()) is not None

"""
Heuristic linguistic metrics.

Pure functions over cleaned text and tokens:
- Intent classification (six fixed categories)
- Complexity and ambiguity (weighted densities)
- Variable, language and domain-hint detection
- Lexicon sentiment and Flesch readability
- Technical term extraction
"""

import re
from typing import List

import numpy as np

from ..models.analysis import Intent, Token
from .lexicons import (
    AMBIGUITY_WEIGHTS,
    COMPLEXITY_WEIGHTS,
    CONNECTIVE_TAGS,
    DOMAIN_KEYWORDS,
    ENGLISH_FUNCTION_WORDS,
    HEDGE_WORDS,
    INDEFINITE_PRONOUNS,
    INTENT_PATTERNS,
    INTENT_SUBCATEGORIES,
    MODAL_VERBS,
    SENTIMENT_LEXICON,
    SPANISH_FUNCTION_WORDS,
    VAGUE_TERMS,
    VARIABLE_PATTERNS,
    is_technical_term,
)
from .normalizer import split_sentences, split_words

# Flesch Reading Ease constants
FLESCH_BASE = 206.835
FLESCH_SENTENCE_WEIGHT = 1.015
FLESCH_SYLLABLE_WEIGHT = 84.6

INTENT_KEYWORD_BONUS = 0.2
INTENT_LEADING_BONUS = 0.3


# ============================================================================
# INTENT
# ============================================================================

def detect_intent(text: str, tokens: List[Token]) -> Intent:
    """
    Classify the prompt into one of six intent categories.

    Each keyword found in the token list or the lowercased text adds 0.2;
    text starting with the category's first keyword adds 0.3. The highest
    confidence wins, ties going to the earlier-declared category.

    Args:
        text: Cleaned prompt text
        tokens: Analyzer tokens

    Returns:
        Intent with confidence clamped to 1.0

    Examples:
        >>> detect_intent("create a users table", []).category
        'create'
    """
    lower_text = text.lower()
    token_texts = {t.text.lower() for t in tokens}

    best_category, best_confidence = INTENT_PATTERNS[0][0], -1.0
    for category, keywords in INTENT_PATTERNS:
        confidence = sum(
            INTENT_KEYWORD_BONUS
            for keyword in keywords
            if keyword in token_texts or keyword in lower_text
        )
        if lower_text.startswith(keywords[0]):
            confidence += INTENT_LEADING_BONUS
        if confidence > best_confidence:
            best_category, best_confidence = category, confidence

    subcategories = [sub for sub in INTENT_SUBCATEGORIES[best_category] if sub in lower_text]
    return Intent(
        category=best_category,
        confidence=round(min(best_confidence, 1.0), 4),
        subcategories=subcategories,
    )


# ============================================================================
# COMPLEXITY & AMBIGUITY
# ============================================================================

def calculate_complexity(text: str, tokens: List[Token]) -> float:
    """
    Weighted complexity in [0, 1].

    Components: length (capped at 2x), average sentence length (capped at
    1.5x), vocabulary richness, technical-term density and connective
    (conjunction/preposition) density. Empty text is 0.0.

    Args:
        text: Cleaned prompt text
        tokens: Analyzer tokens

    Returns:
        Complexity score
    """
    if not text or not tokens:
        return 0.0

    n = len(tokens)
    complexity = min(len(text) / 100, 2.0) * COMPLEXITY_WEIGHTS["length"]

    sentences = split_sentences(text)
    if sentences:
        avg_sentence_length = len(text) / len(sentences)
        complexity += min(avg_sentence_length / 30, 1.5) * COMPLEXITY_WEIGHTS["sentence"]

    unique_lemmas = {t.lemma for t in tokens}
    complexity += (len(unique_lemmas) / n) * COMPLEXITY_WEIGHTS["vocabulary"]

    tech_count = sum(1 for t in tokens if is_technical_term(t.text))
    complexity += min(tech_count / n * 5, 1.0) * COMPLEXITY_WEIGHTS["technical"]

    connectives = sum(1 for t in tokens if t.pos in CONNECTIVE_TAGS)
    complexity += min(connectives / n * 2, 1.0) * COMPLEXITY_WEIGHTS["syntactic"]

    return float(np.clip(complexity, 0.0, 1.0))


def calculate_ambiguity(tokens: List[Token]) -> float:
    """
    Weighted ambiguity in [0, 1].

    Densities of vague terms (0.4), indefinite pronouns (0.3), modal verbs
    (0.2) and hedge words (0.1). No tokens means maximal ambiguity (1.0).

    Args:
        tokens: Analyzer tokens

    Returns:
        Ambiguity score
    """
    if not tokens:
        return 1.0

    n = len(tokens)
    words = [t.text.lower() for t in tokens]

    score = (
        sum(1 for w in words if w in VAGUE_TERMS) / n * AMBIGUITY_WEIGHTS["vague"]
        + sum(1 for w in words if w in INDEFINITE_PRONOUNS) / n * AMBIGUITY_WEIGHTS["pronoun"]
        + sum(1 for w in words if w in MODAL_VERBS) / n * AMBIGUITY_WEIGHTS["modal"]
        + sum(1 for w in words if w in HEDGE_WORDS) / n * AMBIGUITY_WEIGHTS["hedge"]
    )
    return float(np.clip(score, 0.0, 1.0))


# ============================================================================
# VARIABLES, LANGUAGE, DOMAIN HINTS
# ============================================================================

def detect_variables(text: str) -> bool:
    """True if any placeholder pattern ({{x}}, $x, :x, %x%, [x], <x>) occurs."""
    return any(pattern.search(text) for pattern in VARIABLE_PATTERNS)


def detect_language(text: str) -> str:
    """
    Majority vote between Spanish and English function words.

    Returns:
        "es", "en", or "unknown" on a tie
    """
    spanish = len(SPANISH_FUNCTION_WORDS.findall(text))
    english = len(ENGLISH_FUNCTION_WORDS.findall(text))
    if spanish > english:
        return "es"
    if english > spanish:
        return "en"
    return "unknown"


def extract_domain_hints(text: str) -> List[str]:
    """
    Domains with at least one keyword present (word-prefix match, plural allowed).

    Returns:
        Domain names in fixed declaration order
    """
    lower_text = text.lower()
    return [
        domain
        for domain, keywords in DOMAIN_KEYWORDS.items()
        if any(re.search(rf"\b{re.escape(kw)}(?:s|es)?\b", lower_text) for kw in keywords)
    ]


# ============================================================================
# SENTIMENT & READABILITY
# ============================================================================

def analyze_sentiment(text: str) -> float:
    """
    Lexicon polarity: sum of word valences divided by word count, clamped to [-1, 1].
    """
    words = re.findall(r"\w+", text.lower())
    if not words:
        return 0.0
    score = sum(SENTIMENT_LEXICON.get(w, 0) for w in words) / len(words)
    return float(np.clip(score, -1.0, 1.0))


def count_syllables(word: str) -> int:
    """
    Vowel-group syllable count with silent trailing 'e' decrement.

    Words of three letters or fewer count as one syllable; minimum is one.

    Examples:
        >>> count_syllables("database")
        3
        >>> count_syllables("the")
        1
    """
    word = word.lower()
    if len(word) <= 3:
        return 1

    count = 0
    previous_was_vowel = False
    for ch in word:
        is_vowel = ch in "aeiouy"
        if is_vowel and not previous_was_vowel:
            count += 1
        previous_was_vowel = is_vowel

    if word.endswith("e"):
        count -= 1

    return max(1, count)


def calculate_readability(text: str) -> float:
    """
    Simplified Flesch Reading Ease normalized to [0, 1] (1 = easy).

    Returns:
        0.0 when there are no sentences or words
    """
    sentences = split_sentences(text)
    words = split_words(text)
    if not sentences or not words:
        return 0.0

    syllables = sum(count_syllables(w) for w in words)
    avg_sentence_length = len(words) / len(sentences)
    avg_syllables = syllables / len(words)

    flesch = (
        FLESCH_BASE
        - FLESCH_SENTENCE_WEIGHT * avg_sentence_length
        - FLESCH_SYLLABLE_WEIGHT * avg_syllables
    )
    return float(np.clip(flesch / 100, 0.0, 1.0))


# ============================================================================
# TECHNICAL TERMS
# ============================================================================

def extract_technical_terms(text: str, tokens: List[Token]) -> List[str]:
    """
    Technical terms from tokens and raw words, deduplicated case-insensitively.

    The first-seen casing is preserved.

    Examples:
        >>> extract_technical_terms("use api and API and Docker", [])
        ['api', 'Docker']
    """
    candidates = [t.text for t in tokens] + re.findall(r"\b\w+\b", text)

    seen = set()
    terms = []
    for word in candidates:
        key = word.lower()
        if key not in seen and is_technical_term(word):
            seen.add(key)
            terms.append(word)
    return terms

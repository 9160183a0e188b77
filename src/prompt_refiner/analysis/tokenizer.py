"""
Tokenization with spaCy and a deterministic regex fallback.

Provides:
- spaCy model singleton (English pipeline, configurable)
- Token extraction with Penn part-of-speech tags and lemmas
- Regex word tokenizer + suffix stemmer + heuristic tagger, used when
  spaCy is disabled, not installed, or fails on the input
"""

import re
from typing import Any, List, Optional, Tuple

import spacy
import structlog
from spacy.language import Language

from ..config import settings
from ..models.analysis import Token
from .lexicons import (
    CONJUNCTIONS,
    DETERMINERS,
    MODALS_AUX,
    NEGATIVE_TOKENS,
    POSITIVE_TOKENS,
    PREPOSITIONS,
    PRONOUNS,
    STOPWORDS,
)

logger = structlog.get_logger(__name__)

WORD_RE = re.compile(r"\w+")

# Singleton for spaCy model
_spacy_model: Optional[Language] = None
_spacy_load_failed: bool = False

# (suffix, replacement) tried in order; first match wins
STEM_SUFFIXES = [
    ("ational", "ate"),
    ("ization", "ize"),
    ("fulness", "ful"),
    ("iveness", "ive"),
    ("ousness", "ous"),
    ("ements", "e"),
    ("ement", "e"),
    ("ments", ""),
    ("ment", ""),
    ("ingly", ""),
    ("edly", ""),
    ("ies", "y"),
    ("ing", ""),
    ("ed", ""),
    ("ches", "ch"),
    ("shes", "sh"),
    ("xes", "x"),
    ("ly", ""),
    ("s", ""),
]


def get_spacy_model() -> Language:
    """
    Get or initialize spaCy model (singleton pattern).

    Uses settings.spacy_model_name (en_core_web_sm by default).
    A failed load is remembered so later calls fail fast.

    Returns:
        Initialized spaCy Language instance

    Raises:
        OSError: If spaCy model is not installed
    """
    global _spacy_model, _spacy_load_failed
    if _spacy_model is None:
        if _spacy_load_failed:
            raise OSError(f"spaCy model '{settings.spacy_model_name}' previously failed to load")
        try:
            _spacy_model = spacy.load(settings.spacy_model_name)
        except OSError as e:
            _spacy_load_failed = True
            raise OSError(
                f"spaCy model '{settings.spacy_model_name}' not found. "
                f"Please install it with: python -m spacy download {settings.spacy_model_name}"
            ) from e
    return _spacy_model


def reset_spacy_model() -> None:
    """Forget the cached model and any load failure (used by tests)."""
    global _spacy_model, _spacy_load_failed
    _spacy_model = None
    _spacy_load_failed = False


def is_stop_word(word: str) -> bool:
    """True if word is in the stopword list (case-insensitive)."""
    return word.lower() in STOPWORDS


def token_sentiment(word: str) -> float:
    """Token polarity: +1 positive, -1 negative, 0 otherwise."""
    lowered = word.lower()
    if lowered in POSITIVE_TOKENS:
        return 1.0
    if lowered in NEGATIVE_TOKENS:
        return -1.0
    return 0.0


def stem(word: str) -> str:
    """
    Suffix-stripping stemmer for the regex fallback.

    Keeps at least three characters of stem and never strips "ss".

    Examples:
        >>> stem("tables")
        'table'
        >>> stem("running")
        'runn'
        >>> stem("queries")
        'query'
    """
    word = word.lower()
    if len(word) <= 3 or word.endswith("ss"):
        return word
    for suffix, replacement in STEM_SUFFIXES:
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            return word[: -len(suffix)] + replacement
    return word


def heuristic_tag(word: str, index: int) -> str:
    """
    Approximate Penn tag for the regex fallback.

    Args:
        word: Token text
        index: Token position (sentence-initial capitals are not NNP)

    Returns:
        Penn-style tag (CC, IN, DT, PRP, MD, CD, NNP or NN)
    """
    lowered = word.lower()
    if lowered in CONJUNCTIONS:
        return "CC"
    if lowered in PREPOSITIONS:
        return "IN"
    if lowered in DETERMINERS:
        return "DT"
    if lowered in PRONOUNS:
        return "PRP"
    if lowered in MODALS_AUX:
        return "MD"
    if word.isdigit():
        return "CD"
    if index > 0 and word[:1].isupper():
        return "NNP"
    return "NN"


def regex_tokenize(text: str) -> List[Token]:
    """
    Tokenize with a word regex, stemmer and heuristic tagger.

    Args:
        text: Cleaned prompt text

    Returns:
        List of Token (original casing preserved in text, lemma lowercased)
    """
    return [
        Token(
            text=word,
            pos=heuristic_tag(word, index),
            lemma=stem(word),
            is_stop_word=is_stop_word(word),
            sentiment=token_sentiment(word),
        )
        for index, word in enumerate(WORD_RE.findall(text))
    ]


def spacy_tokenize(text: str) -> Tuple[List[Token], Any]:
    """
    Tokenize with spaCy, skipping punctuation and whitespace tokens.

    Args:
        text: Cleaned prompt text

    Returns:
        (tokens, doc) tuple; doc is reused for named-entity extraction

    Raises:
        OSError: If the spaCy model is unavailable
    """
    nlp = get_spacy_model()
    doc = nlp(text)
    tokens = [
        Token(
            text=tok.text,
            pos=tok.tag_ or "unknown",
            lemma=(tok.lemma_ or tok.text).lower(),
            is_stop_word=is_stop_word(tok.text),
            sentiment=token_sentiment(tok.text),
        )
        for tok in doc
        if not (tok.is_punct or tok.is_space)
    ]
    return tokens, doc


def tokenize_prompt(text: str, use_spacy: Optional[bool] = None) -> Tuple[List[Token], Any, str]:
    """
    Tokenize text, preferring spaCy and falling back to the regex tokenizer.

    Args:
        text: Cleaned prompt text
        use_spacy: Override settings.analyzer_use_spacy

    Returns:
        (tokens, doc_or_None, tokenizer_name) where tokenizer_name is "spacy" or "regex"
    """
    if not text:
        return [], None, "regex"

    if settings.analyzer_use_spacy if use_spacy is None else use_spacy:
        try:
            tokens, doc = spacy_tokenize(text)
            return tokens, doc, "spacy"
        except Exception as e:
            # Fallback: regex tokenizer keeps the analyzer total
            logger.warning(
                "spacy_tokenizer_unavailable",
                model=settings.spacy_model_name,
                error=str(e),
                error_type=type(e).__name__,
            )

    return regex_tokenize(text), None, "regex"

"""
Prompt analyzer.

Produces an AnalysisResult from raw text:
1. Sanitize (control characters, whitespace, silent truncation)
2. Tokenize (spaCy, regex fallback)
3. Entities, intent, complexity, ambiguity, variables, language,
   domain hints, sentiment, readability, technical terms

analyze() never raises for string input. Input longer than
settings.max_input_length is truncated before analysis.
"""

import time
from typing import Optional

import structlog

from ..models.analysis import AnalysisResult, Intent
from .entities import extract_entities
from .metrics import (
    analyze_sentiment,
    calculate_ambiguity,
    calculate_complexity,
    calculate_readability,
    detect_intent,
    detect_language,
    detect_variables,
    extract_domain_hints,
    extract_technical_terms,
)
from .normalizer import clean_input
from .tokenizer import tokenize_prompt

logger = structlog.get_logger(__name__)


class PromptAnalyzer:
    """
    Heuristic linguistic analyzer.

    Stateless apart from the process-wide spaCy singleton; safe to share
    between threads.
    """

    def __init__(self, use_spacy: Optional[bool] = None, max_length: Optional[int] = None):
        """
        Args:
            use_spacy: Override settings.analyzer_use_spacy
            max_length: Override settings.max_input_length
        """
        self.use_spacy = use_spacy
        self.max_length = max_length
        self.logger = logger.bind(component="analyzer")

    def analyze(self, raw_text: str) -> AnalysisResult:
        """
        Analyze a prompt.

        Args:
            raw_text: Raw prompt (any string, including empty)

        Returns:
            AnalysisResult with all scores clamped to their ranges
        """
        start_time = time.time()
        text = clean_input(raw_text, self.max_length)

        try:
            result = self._analyze_clean(text, self.use_spacy)
        except Exception as e:
            # Anything past tokenization is pure; retry once without spaCy
            self.logger.warning(
                "analysis_degraded",
                error=str(e),
                error_type=type(e).__name__,
            )
            result = self._analyze_clean(text, False)

        self.logger.debug(
            "analysis_complete",
            text_length=len(text),
            tokens=len(result.tokens),
            entities=len(result.entities),
            intent=result.intent.category,
            complexity=round(result.complexity, 3),
            ambiguity=round(result.ambiguity_score, 3),
            tokenizer=result.tokenizer,
            processing_time_ms=round((time.time() - start_time) * 1000, 2),
        )
        return result

    def _analyze_clean(self, text: str, use_spacy: Optional[bool]) -> AnalysisResult:
        """Run every analysis step over already-cleaned text."""
        tokens, doc, tokenizer_name = tokenize_prompt(text, use_spacy)

        if not tokens:
            return empty_analysis(text, tokenizer_name)

        return AnalysisResult(
            tokens=tokens,
            entities=extract_entities(text, doc),
            intent=detect_intent(text, tokens),
            complexity=calculate_complexity(text, tokens),
            ambiguity_score=calculate_ambiguity(tokens),
            has_variables=detect_variables(text),
            language=detect_language(text),
            domain_hints=extract_domain_hints(text),
            sentiment_score=analyze_sentiment(text),
            readability_score=calculate_readability(text),
            technical_terms=extract_technical_terms(text, tokens),
            tokenizer=tokenizer_name,
        )


def empty_analysis(text: str = "", tokenizer_name: str = "regex") -> AnalysisResult:
    """
    Analysis for input without tokens: complexity 0, ambiguity 1.

    Placeholder-only text (e.g. "{{x}}" reduced to no words) still reports
    has_variables.
    """
    return AnalysisResult(
        tokens=[],
        entities=[],
        intent=Intent(category="unknown", confidence=0.0, subcategories=[]),
        complexity=0.0,
        ambiguity_score=1.0,
        has_variables=detect_variables(text) if text else False,
        language="unknown",
        domain_hints=[],
        sentiment_score=0.0,
        readability_score=0.0,
        technical_terms=[],
        tokenizer=tokenizer_name,
    )


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def analyze_prompt(raw_text: str, analyzer: Optional[PromptAnalyzer] = None) -> AnalysisResult:
    """
    Analyze a prompt using a default or provided analyzer.

    Args:
        raw_text: Raw prompt text
        analyzer: Optional custom analyzer (default: from config)

    Returns:
        AnalysisResult
    """
    if analyzer is None:
        analyzer = PromptAnalyzer()
    return analyzer.analyze(raw_text)

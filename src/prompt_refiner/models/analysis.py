"""
Analyzer output models.

Defines Pydantic models for:
- Tokens with part of speech, lemma and polarity
- Intent classification
- The aggregate AnalysisResult
"""

from typing import List, Literal

from pydantic import BaseModel, Field

from .entity import Entity


class Token(BaseModel):
    """One analyzed unit of input."""
    text: str
    pos: str = Field(default="unknown", description="Part-of-speech tag (Penn style when available)")
    lemma: str
    is_stop_word: bool = False
    sentiment: float = Field(default=0.0, ge=-1.0, le=1.0)

    model_config = {"frozen": True}


class Intent(BaseModel):
    """Winning intent category with matched sub-vocabulary."""
    category: str
    confidence: float = Field(ge=0.0, le=1.0)
    subcategories: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class AnalysisResult(BaseModel):
    """
    Aggregate linguistic analysis of a prompt.

    All bounded scores are clamped to their range. Empty input yields
    complexity 0.0 and ambiguity_score 1.0.
    """
    tokens: List[Token] = Field(default_factory=list)
    entities: List[Entity] = Field(default_factory=list)
    intent: Intent
    complexity: float = Field(ge=0.0, le=1.0)
    ambiguity_score: float = Field(ge=0.0, le=1.0)
    has_variables: bool = False
    language: Literal["en", "es", "unknown"] = "unknown"
    domain_hints: List[str] = Field(default_factory=list)
    sentiment_score: float = Field(default=0.0, ge=-1.0, le=1.0)
    readability_score: float = Field(default=0.0, ge=0.0, le=1.0)
    technical_terms: List[str] = Field(default_factory=list)
    tokenizer: str = Field(default="regex", description="Tokenizer used: spacy | regex")

    model_config = {"frozen": True}

    @property
    def word_count(self) -> int:
        """Number of tokens."""
        return len(self.tokens)

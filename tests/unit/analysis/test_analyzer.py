"""
Unit tests for the prompt analyzer.

Tests cover:
- Empty and non-string input
- Score ranges and variable/language/domain detection
- Silent truncation of long input
- spaCy path (mocked model) and regex fallback
"""

import pytest
from unittest.mock import MagicMock, patch

from prompt_refiner.analysis.analyzer import PromptAnalyzer, analyze_prompt, empty_analysis
from prompt_refiner.analysis.tokenizer import get_spacy_model, reset_spacy_model


def _spacy_token(text, tag="NN", punct=False):
    token = MagicMock()
    token.text = text
    token.tag_ = tag
    token.lemma_ = text.lower()
    token.is_punct = punct
    token.is_space = False
    return token


def _fake_nlp(text):
    doc = MagicMock()
    words = text.replace(".", " .").split()
    doc.__iter__.return_value = iter([_spacy_token(w, punct=(w == ".")) for w in words])
    doc.ents = []
    return doc


@pytest.mark.unit
class TestEmptyInput:
    """Test analysis of empty and degenerate input."""

    def test_empty_string(self, analyzer):
        """Empty input has no tokens, zero complexity and maximal ambiguity."""
        result = analyzer.analyze("")

        assert result.tokens == []
        assert result.entities == []
        assert result.complexity == 0.0
        assert result.ambiguity_score == 1.0

    def test_whitespace_only(self, analyzer):
        """Whitespace is cleaned away before analysis."""
        result = analyzer.analyze("   \n\t  ")

        assert result.tokens == []
        assert result.ambiguity_score == 1.0

    def test_non_string_input(self, analyzer):
        """Non-string input is treated as empty instead of raising."""
        result = analyzer.analyze(None)

        assert result.tokens == []
        assert result.complexity == 0.0

    def test_empty_analysis_helper(self):
        """empty_analysis reports unknown intent."""
        result = empty_analysis()

        assert result.intent.category == "unknown"
        assert result.intent.confidence == 0.0
        assert result.language == "unknown"


@pytest.mark.unit
class TestAnalysisScores:
    """Test score ranges and detectors."""

    @pytest.mark.parametrize("text", [
        "make query fast",
        "Create a PostgreSQL users table with id, name, email columns",
        "maybe something good, probably some stuff that could be nice",
        "x " * 500,
    ])
    def test_scores_within_bounds(self, analyzer, text):
        """Complexity, ambiguity and readability stay in [0, 1]."""
        result = analyzer.analyze(text)

        assert 0.0 <= result.complexity <= 1.0
        assert 0.0 <= result.ambiguity_score <= 1.0
        assert 0.0 <= result.readability_score <= 1.0
        assert -1.0 <= result.sentiment_score <= 1.0

    def test_vague_text_more_ambiguous(self, analyzer):
        """Vague wording raises the ambiguity score."""
        vague = analyzer.analyze("make something nice with some stuff")
        precise = analyzer.analyze("Create a PostgreSQL table named orders")

        assert vague.ambiguity_score > precise.ambiguity_score

    def test_template_variables_detected(self, analyzer):
        """{{var}} placeholders set has_variables and produce entities."""
        result = analyzer.analyze("Write a summary of {{document}}")

        assert result.has_variables is True
        assert any(e.label == "TEMPLATE_VARIABLE" for e in result.entities)

    def test_spanish_detected(self, analyzer):
        """Spanish function words win the language vote."""
        result = analyzer.analyze("hazme una tabla para los usuarios de la tienda")

        assert result.language == "es"

    def test_english_detected(self, analyzer):
        """English function words win the language vote."""
        result = analyzer.analyze("Create a table for the users of the store")

        assert result.language == "en"

    def test_domain_hints(self, analyzer):
        """Domain keywords produce hints."""
        result = analyzer.analyze("Create a users table in the database")

        assert "sql" in result.domain_hints

    def test_technical_terms(self, analyzer):
        """Acronyms and known technologies are technical terms."""
        result = analyzer.analyze("Build a REST API with Docker and PostgreSQL")

        assert "REST" in result.technical_terms
        assert "API" in result.technical_terms
        assert "Docker" in result.technical_terms
        assert "PostgreSQL" in result.technical_terms

    def test_intent_create(self, analyzer):
        """Leading 'create' selects the create intent."""
        result = analyzer.analyze("create a users table")

        assert result.intent.category == "create"
        assert result.intent.confidence > 0.0

    def test_long_input_truncated(self):
        """Input beyond max_length is truncated silently."""
        analyzer = PromptAnalyzer(use_spacy=False, max_length=20)

        result = analyzer.analyze("word " * 100)

        assert len(result.tokens) <= 4

    def test_convenience_function(self, analyzer):
        """analyze_prompt uses the provided analyzer."""
        result = analyze_prompt("make query fast", analyzer=analyzer)

        assert result.tokenizer == "regex"
        assert [t.text for t in result.tokens] == ["make", "query", "fast"]


@pytest.mark.unit
class TestTokenizerSelection:
    """Test spaCy usage and regex fallback."""

    @patch("prompt_refiner.analysis.tokenizer.get_spacy_model")
    def test_spacy_tokenizer_used(self, mock_get_model):
        """A working spaCy model is used and punctuation is skipped."""
        mock_get_model.return_value = _fake_nlp

        result = PromptAnalyzer(use_spacy=True).analyze("Create a table.")

        assert result.tokenizer == "spacy"
        assert [t.text for t in result.tokens] == ["Create", "a", "table"]

    @patch("prompt_refiner.analysis.tokenizer.get_spacy_model")
    def test_spacy_failure_falls_back(self, mock_get_model):
        """A missing model falls back to the regex tokenizer."""
        mock_get_model.side_effect = OSError("model not installed")

        result = PromptAnalyzer(use_spacy=True).analyze("Create a table.")

        assert result.tokenizer == "regex"
        assert len(result.tokens) == 3

    @patch("prompt_refiner.analysis.tokenizer.settings")
    def test_settings_disable_spacy(self, mock_settings):
        """settings.analyzer_use_spacy=False selects the regex tokenizer."""
        mock_settings.analyzer_use_spacy = False
        mock_settings.max_input_length = 10000

        result = PromptAnalyzer().analyze("Create a table")

        assert result.tokenizer == "regex"


@pytest.mark.unit
class TestSpacyModelLoading:
    """Test the spaCy model singleton."""

    def setup_method(self):
        reset_spacy_model()

    def teardown_method(self):
        reset_spacy_model()

    @patch("prompt_refiner.analysis.tokenizer.spacy.load")
    def test_model_loaded_once(self, mock_load):
        """The model is loaded on first use and reused afterwards."""
        mock_load.return_value = _fake_nlp

        assert get_spacy_model() is _fake_nlp
        assert get_spacy_model() is _fake_nlp
        assert mock_load.call_count == 1

    @patch("prompt_refiner.analysis.tokenizer.spacy.load")
    def test_failed_load_is_remembered(self, mock_load):
        """A missing model fails fast on later calls without reloading."""
        mock_load.side_effect = OSError("can't find model")

        with pytest.raises(OSError, match="not found"):
            get_spacy_model()
        with pytest.raises(OSError, match="previously failed"):
            get_spacy_model()
        assert mock_load.call_count == 1

"""
Unit tests for text normalization and heuristic metrics.
"""

import pytest

from prompt_refiner.analysis.entities import extract_entities_regex
from prompt_refiner.analysis.metrics import (
    analyze_sentiment,
    calculate_ambiguity,
    calculate_readability,
    count_syllables,
    detect_intent,
    detect_language,
    detect_variables,
    extract_technical_terms,
)
from prompt_refiner.analysis.normalizer import clean_input, normalize_prompt_text
from prompt_refiner.analysis.tokenizer import regex_tokenize, stem


@pytest.mark.unit
class TestCleanInput:
    """Test clean_input sanitization."""

    def test_collapses_whitespace_and_control_chars(self):
        """Control characters go, whitespace runs collapse."""
        assert clean_input("  make\x00 a   table\n\n") == "make a table"

    def test_non_string(self):
        """Non-string input becomes the empty string."""
        assert clean_input(42) == ""
        assert clean_input(None) == ""

    def test_truncation(self):
        """max_length truncates silently."""
        assert clean_input("abcdefghij", max_length=4) == "abcd"

    def test_normalize_keeps_lines(self):
        """normalize_prompt_text keeps line structure but trims trailing spaces."""
        result = normalize_prompt_text("line one   \r\nline two\n\n\n\nline three")

        assert result == "line one\nline two\n\nline three"

    def test_normalize_keeps_indentation(self):
        """Nested bullets keep their indent; runs inside a line collapse."""
        result = normalize_prompt_text("items:\n    - a   b\n\t- c\n")

        assert result == "items:\n    - a b\n\t- c"


@pytest.mark.unit
class TestRegexTokenizer:
    """Test regex tokenizer helpers."""

    @pytest.mark.parametrize("word,expected", [
        ("tables", "table"),
        ("queries", "query"),
        ("running", "runn"),
        ("class", "class"),
        ("api", "api"),
    ])
    def test_stem(self, word, expected):
        """Suffix stripping keeps at least three characters."""
        assert stem(word) == expected

    def test_tags_and_stopwords(self):
        """Heuristic tags and stopword flags."""
        tokens = regex_tokenize("Create a table and an index")
        by_text = {t.text: t for t in tokens}

        assert by_text["a"].pos == "DT"
        assert by_text["and"].pos == "CC"
        assert by_text["a"].is_stop_word is True
        assert by_text["table"].is_stop_word is False


@pytest.mark.unit
class TestMetrics:
    """Test individual metric functions."""

    def test_ambiguity_empty_tokens(self):
        """No tokens means maximal ambiguity."""
        assert calculate_ambiguity([]) == 1.0

    def test_readability_empty(self):
        """No sentences means zero readability."""
        assert calculate_readability("") == 0.0

    def test_readability_simple_text_is_easy(self):
        """Short words in short sentences read easily."""
        assert calculate_readability("The cat sat. The dog ran.") > 0.8

    @pytest.mark.parametrize("word,expected", [
        ("database", 3),
        ("the", 1),
        ("table", 1),
        ("query", 2),
    ])
    def test_count_syllables(self, word, expected):
        assert count_syllables(word) == expected

    def test_detect_variables(self):
        """All placeholder syntaxes are recognized."""
        assert detect_variables("use {{name}}")
        assert detect_variables("use $name")
        assert detect_variables("use <name>")
        assert not detect_variables("plain text")

    def test_detect_language_tie(self):
        """No function words is a tie."""
        assert detect_language("Docker Kubernetes") == "unknown"

    def test_detect_intent_debug(self):
        """Debug keywords select the debug intent."""
        intent = detect_intent("fix the login error", [])

        assert intent.category == "debug"

    def test_technical_terms_deduplicated(self):
        """First-seen casing wins."""
        assert extract_technical_terms("use api and API and Docker", []) == ["api", "Docker"]


@pytest.mark.unit
class TestDetectIntent:
    """Test keyword scoring of prompt intent."""

    def test_leading_keyword_bonus(self):
        """Starting with the category's first keyword adds 0.3 on top of 0.2."""
        intent = detect_intent("create a users table", [])

        assert intent.category == "create"
        assert intent.confidence == pytest.approx(0.5)

    def test_tie_goes_to_earlier_category(self):
        """'improve' scores modify and optimize equally; modify is declared first."""
        intent = detect_intent("improve it", [])

        assert intent.category == "modify"
        assert intent.confidence == pytest.approx(0.2)

    def test_confidence_clamped(self):
        """Many keywords cannot push confidence past 1.0."""
        intent = detect_intent("create generate make build write develop design", [])

        assert intent.category == "create"
        assert intent.confidence == 1.0

    def test_subcategories_in_declaration_order(self):
        """Subcategories of the winning intent found in the text are listed."""
        intent = detect_intent("create a function and a class", [])

        assert intent.subcategories == ["function", "class"]


@pytest.mark.unit
class TestRegexEntities:
    """Test the regex entity battery."""

    @staticmethod
    def _texts(text, label):
        return [e.text for e in extract_entities_regex(text) if e.label == label]

    @pytest.mark.parametrize("text,label,expected", [
        ("docs at https://example.com/api now", "URL", ["https://example.com/api"]),
        ("upgrade to 3.11.2", "VERSION", ["3.11.2"]),
        ("edit main.py and schema.sql", "FILE_EXTENSION", ["main.py", "schema.sql"]),
        ("migrate from MySQL to PostgreSQL", "DATABASE", ["MySQL", "PostgreSQL"]),
        ("add OAuth2 and JWT", "AUTH_TECH", ["OAuth2", "JWT"]),
        ("build it in React with TypeScript", "TECHNOLOGY", ["React", "TypeScript"]),
    ])
    def test_detectors(self, text, label, expected):
        """Each detector finds its vocabulary in position order."""
        assert self._texts(text, label) == expected

    def test_overlapping_spans_kept(self):
        """One span matched by two detectors yields two entities."""
        entities = [e for e in extract_entities_regex("Use JWT") if e.text == "JWT"]

        assert {e.label for e in entities} == {"TECH_ACRONYM", "AUTH_TECH"}
        assert {(e.start, e.end) for e in entities} == {(4, 7)}
        assert all(e.confidence == 0.9 for e in entities)


@pytest.mark.unit
class TestSentiment:
    """Test lexicon sentiment polarity."""

    def test_positive(self):
        assert analyze_sentiment("this is a great clean design") > 0

    def test_negative(self):
        assert analyze_sentiment("broken build with errors") < 0

    def test_empty_is_neutral(self):
        assert analyze_sentiment("") == 0.0

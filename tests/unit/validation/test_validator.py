"""
Unit tests for the prompt validator.
"""

from unittest.mock import patch

import pytest

from prompt_refiner.models.enums import IssueKind, IssueSeverity, PromptDomain
from prompt_refiner.validation.validator import (
    PromptValidator,
    format_validation_report,
    validate_prompt,
)


@pytest.fixture
def validator(analyzer):
    return PromptValidator(analyzer=analyzer)


def _codes(issues):
    return [issue.code for issue in issues]


@pytest.mark.unit
class TestErrors:
    """Test fatal findings."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_prompt(self, validator, text):
        """Whitespace-only input is a single critical error with zero metrics."""
        result = validator.validate(text)

        assert result.is_valid is False
        assert _codes(result.errors) == ["EMPTY_PROMPT"]
        assert result.errors[0].severity == IssueSeverity.CRITICAL
        assert result.quality_metrics.clarity == 0.0
        assert result.quality_metrics.actionability == 0.0

    def test_short_fragment(self, validator):
        result = validator.validate("do thing")

        assert "PROMPT_TOO_SHORT" in _codes(result.errors)
        assert "LACKS_STRUCTURE" in _codes(result.errors)

    def test_offensive_content(self, validator):
        result = validator.validate("Write a story where they destroy everything in town.")

        offensive = [e for e in result.errors if e.code == "OFFENSIVE_CONTENT"]
        assert offensive and offensive[0].severity == IssueSeverity.CRITICAL

    def test_incomplete_prompt(self, validator):
        result = validator.validate("Create a users table with the")

        assert "INCOMPLETE_PROMPT" in _codes(result.errors)

    def test_high_ambiguity(self, validator, analyzer):
        text = "Create a users table with an id column."
        analysis = analyzer.analyze(text).model_copy(update={"ambiguity_score": 0.9})

        result = validator.validate(text, analysis)

        assert "HIGH_AMBIGUITY" in _codes(result.errors)
        assert "MODERATE_AMBIGUITY" not in _codes(result.warnings)

    def test_moderate_ambiguity_is_warning(self, validator, analyzer):
        text = "Create a users table with an id column."
        analysis = analyzer.analyze(text).model_copy(update={"ambiguity_score": 0.5})

        result = validator.validate(text, analysis)

        assert "MODERATE_AMBIGUITY" in _codes(result.warnings)
        assert "HIGH_AMBIGUITY" not in _codes(result.errors)

    def test_specific_prompt_is_valid(self, validator):
        result = validator.validate("Create a PostgreSQL users table with id, name and email columns.")

        assert result.is_valid is True
        assert result.errors == []

    @patch('prompt_refiner.validation.validator.settings')
    def test_thresholds_from_settings(self, mock_settings, analyzer):
        """Length limits are read from settings."""
        mock_settings.validator_min_length = 100
        mock_settings.validator_max_length = 5000
        mock_settings.validator_ambiguity_error = 0.7
        mock_settings.validator_ambiguity_warning = 0.4
        mock_settings.validator_min_readability = 0.3
        mock_settings.validator_redundancy_threshold = 3

        result = PromptValidator(analyzer=analyzer).validate("Create a PostgreSQL users table.")

        assert "PROMPT_TOO_SHORT" in _codes(result.errors)
        assert "Minimum is 100 characters" in result.errors[0].message


@pytest.mark.unit
class TestWarnings:
    """Test non-fatal findings."""

    def test_spanish_prompt(self, validator):
        result = validator.validate("hazme una tabla para los usuarios de la tienda")

        assert "NON_ENGLISH" in _codes(result.warnings)
        assert any(s.kind == IssueKind.LANGUAGE for s in result.suggestions)

    def test_nosql_terms_in_sql_domain(self, validator):
        text = "Create a collection for users in MongoDB."

        with_domain = validator.validate(text, domain=PromptDomain.SQL)
        without_domain = validator.validate(text)

        assert "TERMINOLOGY_MISMATCH" in _codes(with_domain.warnings)
        assert "TERMINOLOGY_MISMATCH" not in _codes(without_domain.warnings)

    def test_template_variables(self, validator):
        result = validator.validate("Write a summary of {{document}} for {{audience}}.")

        assert "TEMPLATE_VARIABLES" in _codes(result.warnings)
        assert result.has_kind(IssueKind.TEMPLATE)

    def test_redundant_terms(self, validator):
        result = validator.validate("Create table, table, table and another table now.")

        redundant = [w for w in result.warnings if w.code == "REDUNDANT_TERMS"]
        assert redundant and "table" in redundant[0].message

    def test_warnings_do_not_invalidate(self, validator):
        result = validator.validate("Write a summary of {{document}} for {{audience}}.")

        assert result.warnings
        assert result.is_valid is True


@pytest.mark.unit
class TestSuggestionsAndMetrics:
    """Test suggestions and quality metrics."""

    def test_vague_terms_suggestion(self, validator):
        result = validator.validate("Write a nice thing about dogs.")

        vague = [s for s in result.suggestions if s.message.startswith("Replace vague terms")]
        assert vague
        assert vague[0].message == "Replace vague terms: nice, thing"
        assert vague[0].after == "well-designed"

    def test_missing_action_verb(self, validator):
        result = validator.validate("Dogs and cats in the garden at night.")

        assert any(s.kind == IssueKind.ACTIONABILITY for s in result.suggestions)

    @pytest.mark.parametrize("text", [
        "make query fast",
        "Create a PostgreSQL users table with id, name and email columns.",
        "hazme un logo bonito para mi marca",
        "First build the image, then deploy it to production within 10 minutes.",
    ])
    def test_metrics_bounded(self, validator, text):
        metrics = validator.validate(text).quality_metrics.model_dump()

        assert len(metrics) == 6
        assert all(0.0 <= value <= 1.0 for value in metrics.values())

    def test_specific_beats_vague_on_clarity(self, validator):
        vague = validator.validate("Make some nice stuff for the thing.")
        precise = validator.validate("Create a PostgreSQL users table with id, name and email columns.")

        assert precise.quality_metrics.clarity > vague.quality_metrics.clarity

    def test_deterministic(self, validator):
        text = "Create a PostgreSQL users table with id, name and email columns."

        assert validator.validate(text) == validator.validate(text)


@pytest.mark.unit
class TestConvenience:
    """Test module-level helpers."""

    def test_validate_prompt_with_instance(self, validator):
        result = validate_prompt("", validator=validator)

        assert result.is_valid is False

    def test_format_report(self, validator):
        report = format_validation_report(validator.validate(""))

        assert report.startswith("Valid: no")
        assert "[EMPTY_PROMPT]" in report

"""
Unit tests for the quality scorer.
"""

from unittest.mock import patch

import pytest

from prompt_refiner.models.enums import PromptDomain
from prompt_refiner.models.scoring import QualityScore
from prompt_refiner.scoring.scorer import PromptScorer, QualityWeights, compute_quality_score
from prompt_refiner.validation.validator import PromptValidator


def _score(value_a, value_b=None):
    value_b = value_a if value_b is None else value_b
    return QualityScore(
        clarity=value_a, specificity=value_a, structure=value_b, completeness=value_b,
        overall=(value_a + value_b) / 2,
    )


@pytest.fixture
def scorer():
    return PromptScorer()


@pytest.mark.unit
class TestQualityWeights:
    """Test weight configuration."""

    def test_domain_weights(self):
        weights = QualityWeights.for_domain(PromptDomain.SQL)

        assert weights.specificity == 0.35
        assert sum(weights.as_dict().values()) == pytest.approx(1.0)

    @patch('prompt_refiner.scoring.scorer.settings')
    def test_extended_domain_uses_settings(self, mock_settings):
        """Domains without a rule set take the configured defaults."""
        mock_settings.score_weight_clarity = 0.4
        mock_settings.score_weight_specificity = 0.2
        mock_settings.score_weight_structure = 0.2
        mock_settings.score_weight_completeness = 0.2

        weights = QualityWeights.for_domain(PromptDomain.FINANCE)

        assert weights.clarity == 0.4

    def test_normalized(self):
        weights = QualityWeights(clarity=1, specificity=1, structure=1, completeness=1).normalized()

        assert weights.as_dict() == pytest.approx({
            "clarity": 0.25, "specificity": 0.25, "structure": 0.25, "completeness": 0.25,
        })

    def test_normalized_zero_total(self):
        weights = QualityWeights(clarity=0, specificity=0, structure=0, completeness=0).normalized()

        assert weights == QualityWeights()


@pytest.mark.unit
class TestScore:
    """Test score computation."""

    @pytest.mark.parametrize("domain", [PromptDomain.SQL, PromptDomain.BRANDING, PromptDomain.GENERAL])
    def test_overall_is_weighted_sum(self, scorer, analyzer, domain):
        text = "Create a PostgreSQL users table with id, name and email columns."
        analysis = analyzer.analyze(text)
        score = scorer.score(text, analysis=analysis, domain=domain)

        weights = QualityWeights.for_domain(domain).as_dict()
        expected = sum(score.dimensions()[name] * weights[name] for name in weights)
        assert score.overall == pytest.approx(expected)

    def test_fixed_weights_override_domain(self, analyzer):
        scorer = PromptScorer(weights=QualityWeights(clarity=1.0, specificity=0.0, structure=0.0, completeness=0.0))
        text = "Create a users table."
        score = scorer.score(text, analysis=analyzer.analyze(text), domain=PromptDomain.SQL)

        assert score.overall == pytest.approx(score.clarity)

    def test_refined_beats_vague(self, scorer, analyzer):
        validator = PromptValidator(analyzer=analyzer)
        vague = "make query fast"
        refined = (
            "Optimize the SQL query for performance. Review the execution plan first, "
            "then add indexes on filtered columns and return the expected response time."
        )

        vague_score = scorer.score(vague, validator.validate(vague), analyzer.analyze(vague), PromptDomain.SQL)
        refined_score = scorer.score(refined, validator.validate(refined), analyzer.analyze(refined), PromptDomain.SQL)

        assert refined_score.overall > vague_score.overall

    def test_bounds(self, scorer):
        score = scorer.score("", domain=PromptDomain.GENERAL)

        for value in score.model_dump().values():
            assert 0.0 <= value <= 1.0

    def test_convenience_function(self, scorer):
        assert compute_quality_score("Create a table.", scorer=scorer) == scorer.score("Create a table.")


@pytest.mark.unit
class TestDetailedScore:
    """Test factors, confidence, improvement and fallback."""

    def test_fallback_on_failure(self, scorer):
        detailed = scorer.calculate_detailed(None)

        assert detailed.degraded_reason.startswith("scoring_failed")
        assert detailed.score == scorer.fallback_score()
        assert detailed.score.overall == 0.5

    def test_custom_fallback_value(self):
        detailed = PromptScorer(fallback_value=0.3).calculate_detailed(None)

        assert detailed.score.clarity == 0.3

    def test_factors_sorted_and_capped(self, scorer, analyzer):
        text = "Make some nice stuff, first the big thing then the small thing, must be 3 pages."
        detailed = scorer.calculate_detailed(text, analysis=analyzer.analyze(text))

        impacts = [f.weight * (1 - f.score) for f in detailed.factors]
        assert len(detailed.factors) <= 8
        assert impacts == sorted(impacts, reverse=True)

    def test_confidence_grows_with_inputs(self, scorer, analyzer):
        text = "Create a PostgreSQL users table with id and email columns."
        bare = scorer.calculate_detailed(text)
        full = scorer.calculate_detailed(
            text, PromptValidator(analyzer=analyzer).validate(text), analyzer.analyze(text)
        )

        assert full.confidence > bare.confidence
        assert 0.5 <= bare.confidence <= 1.0

    def test_improvement(self, scorer):
        assert scorer.calculate_detailed("make query fast").improvement == 0.0

        detailed = scorer.calculate_detailed("Optimize the SQL query for performance.", original="make query fast")
        assert 0.2 <= detailed.improvement <= 0.5


@pytest.mark.unit
class TestCompare:
    """Test score comparison."""

    def test_tie_within_threshold(self, scorer):
        result = scorer.compare(_score(0.70), _score(0.72))

        assert result.winner == "tie"
        assert result.significance == pytest.approx(0.02)

    def test_b_wins(self, scorer):
        result = scorer.compare(_score(0.5), _score(0.5, 0.9))

        assert result.winner == "b"
        assert result.differences["structure"] == pytest.approx(0.4)
        assert "structure" in result.summary

    def test_antisymmetric(self, scorer):
        a, b = _score(0.4), _score(0.8)

        forward = scorer.compare(a, b)
        backward = scorer.compare(b, a)

        assert forward.winner == "b"
        assert backward.winner == "a"
        assert forward.differences["overall"] == pytest.approx(-backward.differences["overall"])
        assert forward.significance == pytest.approx(backward.significance)

    def test_custom_tie_threshold(self):
        result = PromptScorer(tie_threshold=0.5).compare(_score(0.4), _score(0.8))

        assert result.winner == "tie"

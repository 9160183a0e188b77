"""
Prompt quality scoring and comparison.
"""

from .scorer import PromptScorer, QualityWeights, compute_quality_score

__all__ = ["PromptScorer", "QualityWeights", "compute_quality_score"]

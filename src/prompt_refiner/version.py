"""
Version constants for the prompt refinement pipeline.

This module defines all version constants used throughout the pipeline so that
every refined prompt can be traced back to the exact heuristics that produced it.
"""

from .config import settings
from .models.pipeline_version import PipelineVersion

# API Version
API_VERSION = "1.0.0"

# Component versions (update these when implementations change)
ANALYZER_VERSION = "analyzer-1.0.0"
RULES_VERSION = "rules-1.1.0"
VALIDATOR_VERSION = "validator-1.0.0"
SCORER_VERSION = "scorer-1.0.0"
FINGERPRINT_VERSION = "fp-sha256-2"


def get_current_pipeline_version() -> PipelineVersion:
    """
    Get current pipeline version configuration.

    Returns:
        PipelineVersion instance with current versions
    """
    tokenizer_version = (
        f"spacy-{settings.spacy_model_name}" if settings.analyzer_use_spacy else "regex-1.0.0"
    )
    return PipelineVersion(
        analyzer_version=ANALYZER_VERSION,
        tokenizer_version=tokenizer_version,
        rules_version=RULES_VERSION,
        validator_version=VALIDATOR_VERSION,
        scorer_version=SCORER_VERSION,
        fingerprint_version=FINGERPRINT_VERSION,
    )

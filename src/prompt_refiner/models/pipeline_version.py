"""
Pipeline version model for deterministic processing.

This module defines the PipelineVersion model that tracks all component versions
so that the same version parameters + same input = same refined output. The
version string is part of every ProcessResult metadata.
"""

from pydantic import BaseModel, Field


class PipelineVersion(BaseModel):
    """
    Immutable version contract for the refinement pipeline.

    Any change to rules, lexicons or scoring formulas must bump the matching
    component version.
    """

    analyzer_version: str = Field(
        description="Analyzer heuristics version", examples=["analyzer-1.0.0"]
    )
    tokenizer_version: str = Field(
        description="Tokenizer in use (spaCy model or regex fallback)",
        examples=["spacy-en_core_web_sm"],
    )
    rules_version: str = Field(
        description="Domain rule sets version", examples=["rules-1.1.0"]
    )
    validator_version: str = Field(
        description="Validator checks version", examples=["validator-1.0.0"]
    )
    scorer_version: str = Field(
        description="Scoring formulas version", examples=["scorer-1.0.0"]
    )
    fingerprint_version: str = Field(
        description="Cache fingerprint scheme version", examples=["fp-sha256-2"]
    )

    model_config = {
        "frozen": True,  # Immutable
        "json_schema_extra": {
            "example": {
                "analyzer_version": "analyzer-1.0.0",
                "tokenizer_version": "spacy-en_core_web_sm",
                "rules_version": "rules-1.1.0",
                "validator_version": "validator-1.0.0",
                "scorer_version": "scorer-1.0.0",
                "fingerprint_version": "fp-sha256-2",
            }
        },
    }

    def to_repr(self) -> str:
        """
        Short representation for logging and metrics.

        Returns:
            Compact string representation with key version components.
        """
        return f"Pipeline-{self.analyzer_version}-{self.rules_version}-{self.scorer_version}"

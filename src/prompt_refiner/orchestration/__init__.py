"""
Pipeline orchestration: fingerprints, stage results and the orchestrator.
"""

from .fingerprint import cache_key, canonical_payload, compute_fingerprint
from .orchestrator import (
    PromptOrchestrator,
    build_orchestrator,
    build_recommendations,
    cache_ttl,
    compile_suggestions,
    should_include_examples,
)
from .stages import StageResult, refine_stage, score_stage

__all__ = [
    "cache_key",
    "canonical_payload",
    "compute_fingerprint",
    "PromptOrchestrator",
    "build_orchestrator",
    "build_recommendations",
    "cache_ttl",
    "compile_suggestions",
    "should_include_examples",
    "StageResult",
    "refine_stage",
    "score_stage",
]

"""
Exception taxonomy for the prompt refinement pipeline.

Boundary errors (InputError) are raised before any stage runs. Stage errors
(AnalysisError, RuleEngineError, ScoringError) are raised inside a stage and
recovered by the orchestrator into a degraded result. Collaborator errors
(StoreError, CacheError) surface for store operations only.
"""


class PromptRefinerError(Exception):
    """Base exception for all prompt refiner errors."""
    pass


class InputError(PromptRefinerError, ValueError):
    """Raised when a request violates the input contract (empty, oversized, wrong type)."""
    pass


class AnalysisError(PromptRefinerError):
    """Raised when the linguistic tagger fails; recovered via the regex tokenizer."""
    pass


class RuleEngineError(PromptRefinerError):
    """Raised when a rule pattern or replacement fails; recovered by returning the original text."""
    pass


class ScoringError(PromptRefinerError):
    """Raised when score computation fails; recovered via the neutral fallback score."""
    pass


class StoreError(PromptRefinerError):
    """Raised when the prompt store cannot complete an operation."""
    pass


class NotFoundError(StoreError):
    """Raised when a stored prompt id does not exist."""
    pass


class CacheError(PromptRefinerError):
    """Raised by cache backends; the orchestrator treats it as a cache miss."""
    pass


class PipelineTimeoutError(PromptRefinerError, TimeoutError):
    """Raised when the pipeline exceeds its overall timeout."""
    pass

"""
Prompt validation: errors, warnings, suggestions and quality metrics.
"""

from .validator import PromptValidator, ValidationFindings, format_validation_report, validate_prompt

__all__ = [
    "PromptValidator",
    "ValidationFindings",
    "format_validation_report",
    "validate_prompt",
]

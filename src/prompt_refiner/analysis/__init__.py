"""
Prompt analysis package.

Public API:
    - PromptAnalyzer: heuristic analyzer (never raises for string input)
    - analyze_prompt: convenience wrapper
    - clean_input / normalize_prompt_text: text sanitization
"""

from .analyzer import PromptAnalyzer, analyze_prompt, empty_analysis
from .normalizer import clean_input, normalize_prompt_text

__all__ = [
    "PromptAnalyzer",
    "analyze_prompt",
    "empty_analysis",
    "clean_input",
    "normalize_prompt_text",
]

"""
Prompt text sanitization.

Two deterministic normalizations are provided:
- clean_input: single-line form the analyzer measures
  (control characters stripped, whitespace collapsed, truncated)
- normalize_prompt_text: multi-line form that is fingerprinted, refined,
  validated and scored (control characters stripped, line structure kept)
"""

import re
from typing import Optional

from ..config import settings

# Control characters except \t (0x09), \n (0x0A) and \r (0x0D)
CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
INLINE_SPACE_RE = re.compile(r"[ \t]+")
BLANK_RUN_RE = re.compile(r"\n{3,}")


def strip_control_chars(text: str) -> str:
    """
    Remove control characters, keeping newlines and tabs.

    Args:
        text: Input text

    Returns:
        Text without control characters
    """
    return CONTROL_CHARS_RE.sub("", text)


def clean_input(text: object, max_length: Optional[int] = None) -> str:
    """
    Sanitize raw prompt text for analysis.

    Steps:
    1. Non-string input becomes the empty string
    2. Strip control characters (keep newline/tab)
    3. Collapse runs of whitespace to a single space and trim
    4. Truncate silently to max_length (default: settings.max_input_length)

    Args:
        text: Raw input (any type)
        max_length: Optional truncation limit

    Returns:
        Cleaned single-line text

    Examples:
        >>> clean_input("  make\\x00 a   table\\n\\n")
        'make a table'
    """
    if not isinstance(text, str):
        return ""

    limit = max_length if max_length is not None else settings.max_input_length
    cleaned = re.sub(r"\s+", " ", strip_control_chars(text)).strip()
    return cleaned[:limit]


def _squeeze_line(line: str) -> str:
    content = line.strip()
    if not content:
        return ""
    indent = line[: len(line) - len(line.lstrip(" \t"))]
    return indent + INLINE_SPACE_RE.sub(" ", content)


def normalize_prompt_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize prompt text for refinement, keeping its line structure.

    Bullets, numbered steps and blank-line sections written by the user
    survive; only noise inside lines is removed.

    Steps:
    1. Strip control characters and turn \\r\\n / \\r into \\n
    2. Collapse runs of spaces/tabs inside a line (indentation is kept)
    3. Squeeze 3+ newlines into one blank line and trim
    4. Truncate silently to max_length (default: settings.max_input_length)

    Examples:
        >>> normalize_prompt_text("Create a table\\r\\n\\n\\n\\n-  id   column  ")
        'Create a table\\n\\n- id column'
    """
    limit = max_length if max_length is not None else settings.max_input_length
    text = strip_control_chars(text).replace("\r\n", "\n").replace("\r", "\n")
    text = "\n".join(_squeeze_line(line) for line in text.split("\n"))
    return BLANK_RUN_RE.sub("\n\n", text).strip()[:limit]


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation, dropping empty fragments."""
    return [s for s in re.split(r"[.!?]+", text) if s.strip()]


def split_words(text: str) -> list[str]:
    """Split on whitespace, dropping empty fragments."""
    return [w for w in re.split(r"\s+", text) if w]

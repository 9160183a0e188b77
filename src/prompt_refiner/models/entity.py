"""
Entity dataclass for analyzer entity extraction.

Represents entity-like spans found in a prompt. Spans from different
detectors may overlap; no deduplication is performed.
"""

from dataclasses import dataclass
from typing import Literal

EntityLabel = Literal[
    "PERSON",
    "PLACE",
    "ORGANIZATION",
    "TECH_ACRONYM",
    "FILE_EXTENSION",
    "URL",
    "VERSION",
    "VARIABLE",
    "TEMPLATE_VARIABLE",
    "DATABASE",
    "TECHNOLOGY",
    "AUTH_TECH",
]


@dataclass(frozen=True)
class Entity:
    """
    Represents an extracted entity with span information.

    Attributes:
        text: Matched text from the prompt
        label: Entity label
        start: Character start position in the cleaned prompt
        end: Character end position in the cleaned prompt
        confidence: Confidence score (0.0-1.0); 0.9 for regex detectors,
            0.8/0.7/0.6 for person/place/organization NER
    """

    text: str
    label: EntityLabel
    start: int
    end: int
    confidence: float = 0.9

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"Entity('{self.text}', {self.label}, [{self.start},{self.end}], {self.confidence})"

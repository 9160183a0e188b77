"""
Entity extraction for prompts.

Two detector families are unioned without deduplication:
- Named entities (person/place/organization) from the spaCy doc, when one
  is available
- A fixed regex battery for acronyms, file names, URLs, versions,
  placeholders and technology vocabularies
"""

import re
from typing import Any, List, Optional

import structlog

from ..models.entity import Entity

logger = structlog.get_logger(__name__)

REGEX_CONFIDENCE = 0.9

# spaCy label -> (our label, confidence)
NER_LABEL_MAP = {
    "PERSON": ("PERSON", 0.8),
    "GPE": ("PLACE", 0.7),
    "LOC": ("PLACE", 0.7),
    "FAC": ("PLACE", 0.7),
    "ORG": ("ORGANIZATION", 0.6),
}

# (label, pattern) in detector order
ENTITY_PATTERNS = [
    ("TECH_ACRONYM", re.compile(r"\b[A-Z]{2,}\b")),
    ("FILE_EXTENSION", re.compile(r"\b\w+\.(?:js|ts|py|sql|html|css|java|cpp|c|php|rb|go|rs)\b", re.IGNORECASE)),
    ("URL", re.compile(r"\bhttps?://\S+")),
    ("VERSION", re.compile(r"\b\d+(?:\.\d+)*\b")),
    ("VARIABLE", re.compile(r"\$\w+")),
    ("TEMPLATE_VARIABLE", re.compile(r"\{\{\s*\w+\s*\}\}")),
    (
        "DATABASE",
        re.compile(r"\b(?:PostgreSQL|MySQL|MongoDB|Redis|SQLite|MariaDB|Oracle|SQL\s*Server)\b", re.IGNORECASE),
    ),
    (
        "TECHNOLOGY",
        re.compile(
            r"(?<!\w)(?:React|Vue|Angular|Node\.?js|Python|JavaScript|TypeScript|Java|C\+\+|PHP|Ruby|Go|Rust)(?!\w)",
            re.IGNORECASE,
        ),
    ),
    ("AUTH_TECH", re.compile(r"\b(?:OAuth2?|JWT|SAML|OpenID|SSO|2FA|MFA)\b", re.IGNORECASE)),
]


def extract_entities_regex(text: str) -> List[Entity]:
    """
    Run the regex detector battery over text.

    Args:
        text: Cleaned prompt text

    Returns:
        Entities in detector order, then position order; confidence 0.9

    Examples:
        >>> [e.label for e in extract_entities_regex("Use JWT in app.py")]
        ['TECH_ACRONYM', 'FILE_EXTENSION', 'AUTH_TECH']
    """
    entities = []
    for label, pattern in ENTITY_PATTERNS:
        for match in pattern.finditer(text):
            entities.append(
                Entity(
                    text=match.group(0),
                    label=label,
                    start=match.start(),
                    end=match.end(),
                    confidence=REGEX_CONFIDENCE,
                )
            )
    return entities


def extract_entities_ner(doc: Any) -> List[Entity]:
    """
    Map spaCy named entities to person/place/organization entities.

    Args:
        doc: spaCy Doc (from the analyzer's tokenization pass)

    Returns:
        List of Entity for supported spaCy labels; [] when the doc has no ents
    """
    entities = []
    for ent in getattr(doc, "ents", ()):
        mapped = NER_LABEL_MAP.get(ent.label_)
        if mapped is None:
            continue
        label, confidence = mapped
        entities.append(
            Entity(
                text=ent.text,
                label=label,
                start=ent.start_char,
                end=ent.end_char,
                confidence=confidence,
            )
        )
    return entities


def extract_entities(text: str, doc: Optional[Any] = None) -> List[Entity]:
    """
    Union of NER and regex entities (no cross-detector deduplication).

    Args:
        text: Cleaned prompt text
        doc: Optional spaCy Doc; NER is skipped without it

    Returns:
        NER entities followed by regex entities
    """
    if not text:
        return []

    entities: List[Entity] = []
    if doc is not None:
        try:
            entities.extend(extract_entities_ner(doc))
        except Exception as e:
            logger.warning("ner_extraction_failed", error=str(e), error_type=type(e).__name__)

    entities.extend(extract_entities_regex(text))

    logger.debug(
        "entity_extraction_complete",
        total=len(entities),
        ner_used=doc is not None,
    )
    return entities

"""
Cache fingerprints for process() requests.

A fingerprint is a SHA-256 hash over a canonical JSON rendering of every
input field that can change the result. Requests that differ only in
spacing inside lines share a fingerprint. Changing the line structure
(kept by the rule engine), the domain, tone, context, variables, target
model or options changes it.
"""

import hashlib
import json
from typing import Any, Dict

from ..analysis.normalizer import normalize_prompt_text
from ..models.process import ProcessInput
from ..version import FINGERPRINT_VERSION


AUTO_DOMAIN = "auto"


def canonical_payload(data: ProcessInput) -> Dict[str, Any]:
    """
    Fields of a request that determine its result.

    An omitted domain is recorded as "auto": detection is a pure function
    of the text, so requests without a domain still fingerprint
    deterministically.
    """
    return {
        "v": FINGERPRINT_VERSION,
        "raw": normalize_prompt_text(data.raw),
        "domain": data.domain.value if data.domain else AUTO_DOMAIN,
        "tone": data.tone.value if data.tone else None,
        "context": data.context,
        "variables": dict(sorted(data.variables.items())),
        "target_model": data.target_model,
        "options": data.options.model_dump(mode="json"),
    }


def compute_fingerprint(data: ProcessInput) -> str:
    """
    Compute the cache fingerprint of a request.

    Args:
        data: Validated process input

    Returns:
        Hex-encoded SHA-256 hash with prefix

    Examples:
        >>> fp = compute_fingerprint(ProcessInput(raw="make query fast", domain="sql"))
        >>> fp.startswith("sha256-")
        True
    """
    payload = json.dumps(canonical_payload(data), sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    hash_obj = hashlib.sha256(payload.encode("utf-8"))
    return f"sha256-{hash_obj.hexdigest()}"


def cache_key(fingerprint: str) -> str:
    """Cache key for a fingerprint (backends add their own prefix)."""
    return f"process:{fingerprint}"

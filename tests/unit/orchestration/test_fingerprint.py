"""
Unit tests for request fingerprints.
"""

import pytest

from prompt_refiner.models.enums import PromptDomain, PromptTone
from prompt_refiner.models.process import ProcessInput, ProcessOptions
from prompt_refiner.orchestration.fingerprint import (
    AUTO_DOMAIN,
    cache_key,
    canonical_payload,
    compute_fingerprint,
)


@pytest.mark.unit
class TestFingerprint:
    """Test fingerprint stability and sensitivity."""

    def test_format(self):
        fp = compute_fingerprint(ProcessInput(raw="make query fast", domain="sql"))

        assert fp.startswith("sha256-")
        assert len(fp) == len("sha256-") + 64
        assert cache_key(fp) == f"process:{fp}"

    def test_inline_whitespace_insensitive(self):
        a = compute_fingerprint(ProcessInput(raw="make query fast"))
        b = compute_fingerprint(ProcessInput(raw="  make   query\tfast \n\n\n"))

        assert a == b

    def test_line_structure_changes_fingerprint(self):
        """A bullet list and the same words on one line refine differently."""
        a = compute_fingerprint(ProcessInput(raw="Requirements: - id - email"))
        b = compute_fingerprint(ProcessInput(raw="Requirements:\n- id\n- email"))

        assert a != b

    def test_variable_order_irrelevant(self):
        a = compute_fingerprint(ProcessInput(raw="x", variables={"a": "1", "b": "2"}))
        b = compute_fingerprint(ProcessInput(raw="x", variables={"b": "2", "a": "1"}))

        assert a == b

    @pytest.mark.parametrize("changes", [
        {"domain": PromptDomain.SQL},
        {"domain": PromptDomain.DEVOPS},
        {"tone": PromptTone.FORMAL},
        {"context": "Postgres 16"},
        {"variables": {"table": "orders"}},
        {"target_model": "gpt-4o"},
        {"options": ProcessOptions(include_examples=True)},
    ])
    def test_every_field_changes_fingerprint(self, changes):
        base = ProcessInput(raw="make query fast")

        assert compute_fingerprint(base) != compute_fingerprint(base.model_copy(update=changes))

    def test_omitted_domain_is_auto(self):
        payload = canonical_payload(ProcessInput(raw="make query fast"))

        assert payload["domain"] == AUTO_DOMAIN == "auto"

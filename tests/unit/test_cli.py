"""
Unit tests for the command-line interface.
"""

import io
import json
from unittest.mock import patch

import pytest

from prompt_refiner.cli.refine import build_parser, main, parse_variables, read_prompt
from prompt_refiner.exceptions import InputError


def _json_payload(out):
    """The JSON document printed last (log lines may precede it)."""
    return json.loads(out[out.index("{\n"):])


@pytest.fixture(autouse=True)
def no_logging_reconfiguration():
    """Keep the test session's logging configuration."""
    with patch('prompt_refiner.cli.refine.setup_logging'):
        yield


@pytest.mark.unit
class TestHelpers:
    """Test argument helpers."""

    def test_parse_variables(self):
        assert parse_variables(["table=orders", "where=id = 1"]) == {"table": "orders", "where": "id = 1"}
        assert parse_variables(None) == {}

    @pytest.mark.parametrize("pair", ["noequals", "=value"])
    def test_parse_variables_invalid(self, pair):
        with pytest.raises(InputError, match="Invalid variable"):
            parse_variables([pair])

    def test_read_prompt_from_file(self, tmp_path):
        path = tmp_path / "prompt.txt"
        path.write_text("make query fast\n", encoding="utf-8")

        assert read_prompt(None, str(path)) == "make query fast\n"

    def test_read_prompt_from_stdin(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("from stdin"))

        assert read_prompt(None, "-") == "from stdin"

    def test_read_prompt_missing(self):
        with pytest.raises(InputError, match="No prompt given"):
            read_prompt(None, None)

    def test_parser_rejects_unknown_domain(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["x", "--domain", "astrology"])


@pytest.mark.unit
class TestMain:
    """Test the CLI entry point."""

    def test_text_output(self, capsys):
        exit_code = main(["make query fast", "--domain", "sql"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Refined prompt:" in out
        assert "Optimize the SQL query for performance." in out
        assert "Domain: sql" in out
        assert "Valid: " in out

    def test_json_output(self, capsys):
        exit_code = main(["make query fast", "--domain", "sql", "--tone", "technical", "--json"])

        payload = _json_payload(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["metadata"]["domain"] == "sql"
        assert payload["metadata"]["tone"] == "technical"
        assert payload["metadata"]["cache_hit"] is False

    def test_forced_template(self, capsys):
        exit_code = main(["write a note", "--template", "step-by-step", "--json"])

        payload = _json_payload(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["template"]["type"] == "step-by-step"

    def test_file_input(self, tmp_path, capsys):
        path = tmp_path / "prompt.txt"
        path.write_text("deploy my app with docker", encoding="utf-8")

        assert main(["--file", str(path), "--json"]) == 0
        assert _json_payload(capsys.readouterr().out)["metadata"]["domain"] == "devops"

    def test_invalid_variable(self, capsys):
        exit_code = main(["make query fast", "--var", "broken"])

        assert exit_code == 1
        assert "Error: Invalid variable" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        exit_code = main(["--file", str(tmp_path / "missing.txt")])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_no_prompt(self, capsys):
        assert main([]) == 1

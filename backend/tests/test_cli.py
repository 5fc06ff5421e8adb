"""Tests for the fieldcheck CLI."""

import json
import textwrap

import pytest
from click.testing import CliRunner

from fieldcheck.cli.main import cli


RULES = textwrap.dedent(
    """
    fields:
      name:
        label: Name
        steps:
          - filter: trim
          - not-empty
          - is: max-length 20
      age:
        steps:
          - not-empty
          - integer
          - is: ">= 18"
    """
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("FIELDCHECK_MESSAGES", raising=False)
    monkeypatch.delenv("FIELDCHECK_LOG_LEVEL", raising=False)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(RULES)
    return path


def write_data(tmp_path, content):
    path = tmp_path / "data.yaml"
    path.write_text(content)
    return path


class TestCheck:
    def test_valid_data(self, runner, rules_file, tmp_path):
        data = write_data(tmp_path, "name: '  Alice '\nage: 30\n")
        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 0, result.output
        assert "✓ name" in result.output
        assert "All fields are valid." in result.output

    def test_invalid_data(self, runner, rules_file, tmp_path):
        data = write_data(tmp_path, "name: Bob\nage: 12\n")
        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 1
        assert "✗ age: Greater than or equals to 18." in result.output
        assert "1 invalid field(s)" in result.output

    def test_json_output(self, runner, rules_file, tmp_path):
        data = write_data(tmp_path, "name: '  Alice '\nage: '30'\n")
        result = runner.invoke(cli, ["check", str(rules_file), str(data), "--json"])

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["valid"] is False
        assert payload["values"]["name"] == "Alice"
        assert payload["errors"] == {"age": "By integer number."}

    def test_config_messages(self, runner, rules_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("messages:\n  not-empty: '{label} is required.'\n")
        data = write_data(tmp_path, "age: 20\n")
        result = runner.invoke(
            cli, ["check", str(rules_file), str(data), "--config", str(config)]
        )

        assert result.exit_code == 1
        assert "✗ name: Name is required." in result.output

    def test_bad_rules_file(self, runner, tmp_path):
        rules = tmp_path / "rules.yaml"
        rules.write_text("fields:\n  a:\n    steps:\n      - {is: pass, map: trim}\n")
        data = write_data(tmp_path, "a: 1\n")
        result = runner.invoke(cli, ["check", str(rules), str(data)])

        assert result.exit_code == 2
        assert "Error:" in result.output

    def test_malformed_data(self, runner, rules_file, tmp_path):
        data = write_data(tmp_path, "name: [unclosed\n")
        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 2
        assert "malformed data document" in result.output


class TestRules:
    def test_lists_tests_and_filters(self, runner):
        result = runner.invoke(cli, ["rules"])

        assert result.exit_code == 0
        assert "max-length" in result.output
        assert "In {param} letters." in result.output
        assert "not-empty" in result.output and "(complex)" in result.output
        assert "  trim" in result.output

    def test_json(self, runner):
        result = runner.invoke(cli, ["rules", "--json"])

        assert result.exit_code == 0
        docs = json.loads(result.output)
        names = [rule["name"] for rule in docs["tests"]]
        assert "==" in names
        assert [rule["name"] for rule in docs["filters"]] == ["trim", "ltrim", "rtrim"]

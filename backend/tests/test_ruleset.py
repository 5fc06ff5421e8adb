"""Tests for declarative rule sets."""

import textwrap
from pathlib import Path

import pytest

from fieldcheck.validation import RuleSet, RuleSetError, RuleStep, Validator


RULES_YAML = textwrap.dedent(
    """
    messages:
      not-empty: "{label} is required."
    fields:
      name:
        label: Name
        steps:
          - filter: trim
          - not-empty
          - is: max-length 5
            message: "{label} is too long."
      tags:
        steps:
          - map: trim
          - all: in a,b,c
      nums:
        steps:
          - any: numeric
    """
)


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML)
    return path


class TestRuleSetLoading:
    """Tests for parsing rule set documents."""

    def test_from_yaml(self, rules_file):
        ruleset = RuleSet.from_yaml(rules_file)

        assert list(ruleset.fields) == ["name", "tags", "nums"]
        assert ruleset.messages == {"not-empty": "{label} is required."}
        name = ruleset.fields["name"]
        assert name.label == "Name"
        assert [step.operation for step in name.steps] == ["filter", "is", "is"]
        assert name.steps[1].is_ == "not-empty"
        assert name.steps[2].message == "{label} is too long."

    def test_empty_document(self):
        ruleset = RuleSet.from_dict(None)
        assert ruleset.fields == {}

    def test_step_needs_exactly_one_operation(self):
        with pytest.raises(RuleSetError, match="exactly one"):
            RuleSet.from_dict({"fields": {"a": {"steps": [{"is": "pass", "filter": "trim"}]}}})
        with pytest.raises(RuleSetError, match="exactly one"):
            RuleSet.from_dict({"fields": {"a": {"steps": [{"message": "x"}]}}})

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(RuleSetError):
            RuleSet.from_dict({"fields": {}, "extra": True})
        with pytest.raises(RuleSetError):
            RuleSet.from_dict({"fields": {"a": {"steps": [{"check": "pass"}]}}})

    def test_non_mapping_document(self):
        with pytest.raises(RuleSetError, match="must be a mapping"):
            RuleSet.from_dict(["not", "a", "mapping"])

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fields: [unclosed")
        with pytest.raises(RuleSetError) as exc_info:
            RuleSet.from_yaml(path)
        assert exc_info.value.path == path
        assert str(path) in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleSetError, match="cannot read"):
            RuleSet.from_yaml(tmp_path / "missing.yaml")

    def test_step_built_by_field_name(self):
        step = RuleStep(is_="pass")
        assert step.operation == "is"


class TestRuleSetApply:
    """Tests for running a rule set through a validator."""

    def test_valid_data(self, rules_file):
        validator = Validator({"name": " Al ", "tags": [" a", "c "], "nums": ["x", "1"]})
        RuleSet.from_yaml(rules_file).apply(validator)

        assert validator.valid
        assert validator.values.get("name") == "Al"
        assert validator.values.get("tags") == ["a", "c"]

    def test_invalid_data(self, rules_file):
        validator = Validator({"name": "   ", "tags": ["a", "z"], "nums": ["x"]})
        RuleSet.from_yaml(rules_file).apply(validator)

        assert validator.invalid
        assert validator.errors.get("name").message == "Name is required."
        assert validator.errors.get("tags").message == "Choose in a,b,c."
        assert validator.errors.get("nums").message == "By number."

    def test_step_message_overrides(self, rules_file):
        validator = Validator({"name": "Alexander"})
        RuleSet.from_yaml(rules_file).apply(validator)
        assert validator.errors.get("name").message == "Name is too long."

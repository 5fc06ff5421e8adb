"""Declarative rule sets loaded from YAML.

A rule set lists, per field, the chain of checks and filters to apply:

    messages:
      not-empty: "{label} is required."
    fields:
      name:
        label: Name
        steps:
          - filter: trim
          - not-empty            # shorthand for {is: not-empty}
          - is: max-length 255
      tags:
        steps:
          - all: in a,b,c

Each step holds exactly one of ``is``, ``all``, ``any``, ``filter`` or ``map``
plus an optional ``message`` overriding the template for that check.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from fieldcheck.validation.context import ValidationContext
from fieldcheck.validation.validator import Validator

logger = logging.getLogger(__name__)

STEP_OPERATIONS = ("is", "all", "any", "filter", "map")


class RuleSetError(Exception):
    """Raised when a rule set cannot be read or does not match the expected shape."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}{message}")


class RuleStep(BaseModel):
    """One check or filter in a field's chain."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    is_: str | None = Field(default=None, alias="is")
    all: str | None = None
    any: str | None = None
    filter: str | None = None
    map: str | None = None
    message: str | None = None

    @model_validator(mode="after")
    def _exactly_one_operation(self) -> "RuleStep":
        given = [op for op in STEP_OPERATIONS if self.rule_for(op) is not None]
        if len(given) != 1:
            raise ValueError(
                "a step needs exactly one of: " + ", ".join(STEP_OPERATIONS)
                + f" (got {', '.join(given) or 'none'})"
            )
        return self

    def rule_for(self, operation: str) -> str | None:
        return self.is_ if operation == "is" else getattr(self, operation)

    @property
    def operation(self) -> str:
        return next(op for op in STEP_OPERATIONS if self.rule_for(op) is not None)

    def apply(self, context: ValidationContext) -> ValidationContext:
        operation = self.operation
        rule = self.rule_for(operation)
        if operation == "is":
            return context.is_(rule, self.message)
        if operation == "all":
            return context.is_all(rule, self.message)
        if operation == "any":
            return context.is_any(rule, self.message)
        if operation == "filter":
            return context.filter(rule)
        return context.map(rule)


class FieldRules(BaseModel):
    """The label and chain of steps for one field."""

    model_config = ConfigDict(extra="forbid")

    label: str | None = None
    steps: list[RuleStep] = Field(default_factory=list)

    @field_validator("steps", mode="before")
    @classmethod
    def _expand_shorthand(cls, steps: Any) -> Any:
        # A bare string step means {is: <string>}
        if not isinstance(steps, list):
            return steps
        return [{"is": step} if isinstance(step, str) else step for step in steps]


class RuleSet(BaseModel):
    """Message overrides plus per-field rule chains, in declared field order."""

    model_config = ConfigDict(extra="forbid")

    messages: dict[str, str] = Field(default_factory=dict)
    fields: dict[str, FieldRules] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, path: Path | None = None) -> "RuleSet":
        """Create a RuleSet from a parsed document.

        Raises:
            RuleSetError: If the document does not describe a rule set
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RuleSetError("rule set must be a mapping", path)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise RuleSetError(f"invalid rule set: {e}", path) from e

    @classmethod
    def from_yaml(cls, path: Path) -> "RuleSet":
        """Load a rule set from a YAML (or JSON) file.

        Raises:
            RuleSetError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise RuleSetError(f"cannot read rule set: {e}", path) from e
        except yaml.YAMLError as e:
            raise RuleSetError(f"malformed YAML: {e}", path) from e

        ruleset = cls.from_dict(data, path)
        logger.info("Loaded rule set %s (%d fields)", path, len(ruleset.fields))
        return ruleset

    def apply(self, validator: Validator) -> Validator:
        """Merge messages into ``validator`` and run every field's chain."""
        validator.override_error_messages(self.messages)
        for name, rules in self.fields.items():
            context = validator.check(name, rules.label)
            for step in rules.steps:
                step.apply(context)
        return validator

"""Per-field validation context.

A ValidationContext accumulates chained checks and filters for one field:

    validator.check("age").is_("not-empty").is_("integer").is_(">= 21", "Adult only.")

The first failing test marks the context invalid; later tests and filters in
the chain are skipped. Filters replace the field's current value for the rest
of the chain.
"""

import re
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from fieldcheck.validation.validator import Validator

# Message templates are strings with placeholders or callables (param, value, label) -> str
MessageTemplate = str | Callable[[Any, Any, str], str]


class ValidationContext:
    """Fluent accumulator of check/filter outcomes for one field."""

    PLACEHOLDER = re.compile(r"\{(?P<name>param|value|label)\}")

    def __init__(self, validator: "Validator", name: Any, label: str | None = None):
        self._validator = validator
        self._name = name
        self._label = label if label else str(name)
        self._filtered = False
        self._filtered_value: Any = None
        self._valid = True
        self._test: Any = None
        self._message: str | None = None

    # -------------------------------------------------------------------------
    # Chain
    # -------------------------------------------------------------------------

    def is_(
        self,
        test: Any,
        message: MessageTemplate | None = None,
        param: str | None = None,
    ) -> "ValidationContext":
        """Apply a validity test.

        Args:
            test: "name [param]" string, or a callable used inline
            message: Overrides the registered message template for this check
            param: Parameter string for an inline callable
        """
        return self._run_test(self._validator.exec_test, test, message, param)

    def is_all(
        self,
        test: Any,
        message: MessageTemplate | None = None,
        param: str | None = None,
    ) -> "ValidationContext":
        """Apply a validity test to every element (logical AND)."""
        return self._run_test(self._validator.exec_test_all, test, message, param)

    def is_any(
        self,
        test: Any,
        message: MessageTemplate | None = None,
        param: str | None = None,
    ) -> "ValidationContext":
        """Apply a validity test to the elements (logical OR)."""
        return self._run_test(self._validator.exec_test_any, test, message, param)

    def filter(self, filter_: Any, param: str | None = None) -> "ValidationContext":
        """Replace the current value with the filter's output."""
        return self._run_filter(self._validator.exec_filter, filter_, param)

    def map(self, filter_: Any, param: str | None = None) -> "ValidationContext":
        """Replace the current value by filtering each element."""
        return self._run_filter(self._validator.exec_filter_map, filter_, param)

    def _run_test(
        self,
        executor: Callable[..., tuple[bool, Any]],
        test: Any,
        message: MessageTemplate | None,
        param: str | None,
    ) -> "ValidationContext":
        if not self._valid:
            return self
        rule, param = self._split(test, param)
        passed, value = executor(self._name, self._filtered, self._filtered_value, rule, param)
        if not passed:
            self._test = test
            self._valid = False
            template = message if message is not None else self._validator.message_for(rule)
            self._message = self._render(template, param, value)
        return self

    def _run_filter(
        self,
        executor: Callable[..., tuple[bool, Any]],
        filter_: Any,
        param: str | None,
    ) -> "ValidationContext":
        if not self._valid:
            return self
        rule, param = self._split(filter_, param)
        filtered, value = executor(self._name, self._filtered, self._filtered_value, rule, param)
        if filtered:
            self._filtered = True
            self._filtered_value = value
        return self

    @staticmethod
    def _split(rule: Any, param: str | None) -> tuple[Any, str | None]:
        """Split "max-length 255" into ("max-length", "255")."""
        if not isinstance(rule, str):
            return rule, param
        parts = rule.strip().split(None, 1)
        if not parts:
            return "", param
        if len(parts) == 1:
            return parts[0], param
        return parts[0], parts[1]

    def _render(self, template: MessageTemplate, param: Any, value: Any) -> str:
        if callable(template):
            return template(param, value, self._label)

        replacements = {
            "param": "" if param is None else str(param),
            "value": "" if value is None else str(value),
            "label": self._label,
        }
        return self.PLACEHOLDER.sub(lambda m: replacements[m.group("name")], str(template))

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def name(self) -> Any:
        return self._name

    @property
    def label(self) -> str:
        return self._label

    @property
    def test(self) -> Any:
        """The test that failed, or None while valid."""
        return self._test

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def invalid(self) -> bool:
        return not self._valid

    @property
    def message(self) -> str | None:
        return self._message

    @property
    def value(self) -> Any:
        """The filtered value, or the target's current value if nothing filtered it."""
        if self._filtered:
            return self._filtered_value
        _, value = self._validator.fetch_existence_and_value(self._name)
        return value

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self._name,
            "label": self._label,
            "valid": self._valid,
            "test": self._test if isinstance(self._test, str) or self._test is None else repr(self._test),
            "message": self._message,
        }

    def __repr__(self) -> str:
        state = "valid" if self._valid else f"invalid: {self._message}"
        return f"ValidationContext({self._name!r}, {state})"

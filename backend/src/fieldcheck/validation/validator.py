"""Procedural field validator.

Usage:
    validator = Validator(data)
    validator.check("name").is_("not-empty").is_("max-length 255")
    validator.check("age").is_("not-empty").is_("integer").is_(">= 21", "Adult only.")

    if validator.valid:
        print("OK")
    else:
        for field, context in validator.errors.items():
            print(f"{field}: {context.message}")

The validator owns a copy of a rule registry, the target data, and one
ValidationContext per checked field. ``errors`` and ``values`` are derived
from the stored contexts and recomputed after any check, recheck, uncheck,
or rule execution.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable

from fieldcheck.core.vars import Vars, VarsList
from fieldcheck.validation.context import MessageTemplate, ValidationContext
from fieldcheck.validation.dispatcher import Dispatcher
from fieldcheck.validation.registry import RuleRegistry, create_default_registry
from fieldcheck.validation.types import NOT_REGISTERED

logger = logging.getLogger(__name__)

# Targets that cannot hold fields
_SCALAR_TYPES = (str, bytes, bytearray, int, float, Decimal, bool)


class Validator:
    """Validation facade over a target data source.

    Attributes:
        registry: This validator's own copy of the rule registry
    """

    def __init__(
        self,
        target: Any,
        messages: Mapping[Any, MessageTemplate] | None = None,
        registry: RuleRegistry | None = None,
    ):
        """Initialize the validator.

        Args:
            target: Vars, VarsList, list/tuple, mapping, or any object with attributes
            messages: Message templates overriding the registered ones, by rule name
            registry: Rules to start from (built-ins when None); copied, never mutated
        """
        self.registry = (registry or create_default_registry()).copy()
        self._dispatcher = Dispatcher(self.registry)
        self._messages: dict[Any, MessageTemplate] = {}
        self.override_error_messages(messages or {})

        self._target = target
        self._result = Vars()
        self._errors: Vars | None = None
        self._values: Vars | None = None

    def _invalidate(self) -> None:
        """Mark the derived errors/values views as stale."""
        self._errors = None
        self._values = None

    # -------------------------------------------------------------------------
    # Rules and messages
    # -------------------------------------------------------------------------

    def define_test(
        self,
        name: str,
        callback: Callable[..., Any],
        message: str,
        complex: bool = False,
    ) -> None:
        """Define a custom validity test for this validator only."""
        self.registry.define_test(name, callback, message, complex)

    def define_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        complex: bool = False,
    ) -> None:
        """Define a custom filter for this validator only."""
        self.registry.define_filter(name, callback, complex)

    def override_error_messages(self, messages: Mapping[Any, MessageTemplate]) -> None:
        """Merge message templates over the registered ones, keyed by rule name."""
        for name, message in messages.items():
            self._messages[name] = message

    def message_for(self, name: Any) -> MessageTemplate:
        """Resolve the message template for a test name."""
        try:
            if name in self._messages:
                return self._messages[name]
        except TypeError:
            # Unhashable inline rule
            return NOT_REGISTERED
        return self.registry.message_for(name)

    # -------------------------------------------------------------------------
    # Target access
    # -------------------------------------------------------------------------

    def fetch_existence_and_value(self, name: Any) -> tuple[bool, Any]:
        """Check existence and fetch the value of a field at the same time."""
        target = self._target

        if isinstance(target, Vars):
            try:
                return target.has(name), target.get(name)
            except TypeError:
                return False, None

        if isinstance(target, (VarsList, list, tuple)):
            try:
                index = int(name)
            except (TypeError, ValueError):
                return False, None
            if not 0 <= index < len(target):
                return False, None
            if isinstance(target, VarsList):
                return True, target.get(index)
            return True, target[index]

        if isinstance(target, Mapping):
            try:
                value = target.get(name)
            except TypeError:
                return False, None
            return value is not None, value

        if target is None or isinstance(target, _SCALAR_TYPES):
            return False, None

        # Private and dunder attributes are not fields
        if not isinstance(name, str) or name.startswith("_"):
            return False, None
        value = getattr(target, name, None)
        return value is not None, value

    def _prepare_value(self, field: Any, filtered: bool, filtered_value: Any) -> tuple[bool, Any]:
        if filtered:
            return True, filtered_value
        return self.fetch_existence_and_value(field)

    # -------------------------------------------------------------------------
    # Execution (called by validation contexts)
    # -------------------------------------------------------------------------

    def exec_test(
        self, field: Any, filtered: bool, filtered_value: Any, name: Any, param: str | None
    ) -> tuple[bool, Any]:
        """Execute a validity test against a field."""
        self._invalidate()
        exists, value = self._prepare_value(field, filtered, filtered_value)
        return self._dispatcher.exec_test(exists, value, name, param)

    def exec_test_all(
        self, field: Any, filtered: bool, filtered_value: Any, name: Any, param: str | None
    ) -> tuple[bool, Any]:
        """Execute a validity test against every element (logical AND)."""
        self._invalidate()
        exists, value = self._prepare_value(field, filtered, filtered_value)
        return self._dispatcher.exec_test_all(exists, value, name, param)

    def exec_test_any(
        self, field: Any, filtered: bool, filtered_value: Any, name: Any, param: str | None
    ) -> tuple[bool, Any]:
        """Execute a validity test against the elements (logical OR)."""
        self._invalidate()
        exists, value = self._prepare_value(field, filtered, filtered_value)
        return self._dispatcher.exec_test_any(exists, value, name, param)

    def exec_filter(
        self, field: Any, filtered: bool, filtered_value: Any, name: Any, param: str | None
    ) -> tuple[bool, Any]:
        """Execute a filter against a field."""
        self._invalidate()
        exists, value = self._prepare_value(field, filtered, filtered_value)
        return self._dispatcher.exec_filter(exists, value, name, param)

    def exec_filter_map(
        self, field: Any, filtered: bool, filtered_value: Any, name: Any, param: str | None
    ) -> tuple[bool, Any]:
        """Execute a filter against every element of a field."""
        self._invalidate()
        exists, value = self._prepare_value(field, filtered, filtered_value)
        return self._dispatcher.exec_filter_map(exists, value, name, param)

    # -------------------------------------------------------------------------
    # Field checks
    # -------------------------------------------------------------------------

    def context_for(self, name: Any, label: str | None = None) -> ValidationContext:
        """Return an independent context that is not stored in the result."""
        return ValidationContext(self, name, label)

    def check(self, name: Any, label: str | None = None) -> ValidationContext:
        """Start (or continue) checking a field."""
        self._invalidate()
        if not self._result.has(name):
            logger.debug("Checking field '%s'", name)
            self._result.set(name, self.context_for(name, label))
        return self._result.get(name)

    def recheck(self, name: Any, label: str | None = None) -> ValidationContext:
        """Discard previous results for a field and start over."""
        self._invalidate()
        logger.debug("Rechecking field '%s'", name)
        self._result.set(name, self.context_for(name, label))
        return self._result.get(name)

    def uncheck(self, name: Any) -> None:
        """Forget a field's results."""
        self._invalidate()
        if self._result.has(name):
            logger.debug("Unchecking field '%s'", name)
            self._result.remove(name)

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    @property
    def result(self) -> Vars:
        """All contexts, by field name."""
        return self._result

    @property
    def errors(self) -> Vars:
        """Invalid contexts only, by field name."""
        if self._errors is None:
            errors = Vars()
            for field, context in self._result.items():
                if context.invalid:
                    errors.set(field, context)
            self._errors = errors
        return self._errors

    @property
    def values(self) -> Vars:
        """Current (possibly filtered) values, by field name."""
        if self._values is None:
            values = Vars()
            for field, context in self._result.items():
                values.set(field, context.value)
            self._values = values
        return self._values

    @property
    def valid(self) -> bool:
        return self.errors.count() == 0

    @property
    def invalid(self) -> bool:
        return not self.valid

    @classmethod
    def empty_result(cls, values: Mapping[Any, Any] | None = None) -> Vars:
        """Return passing results for a form's initial state.

        Every given field passes, and looking up any other field yields a
        passing context as well.
        """
        values = values or {}
        validator = cls(values)
        for name in values:
            validator.check(name).is_("pass")
        result = validator.result
        result.set_default(validator.context_for("any").is_("pass"))
        result.set_loose(True)
        return result

"""Rule dispatch for fieldcheck.

The dispatcher turns a rule name (or an inline callable) plus its raw
parameter string into a callable, and applies it to an (exists, value) pair:

- Registered names use the registry's callback and complex flag, with the raw
  parameter string as the single parameter (no parameter when none is written).
- Any other callable is used inline as a simple rule, with the parameter
  string split on single spaces.
- Anything else is unresolved: tests fail closed, filters produce None.

Simple (non-complex) rules pass without running when the field is missing or
conventionally empty, except for "0", 0, False and empty collections.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fieldcheck.core.vars import Vars, VarsList
from fieldcheck.validation.registry import RuleRegistry
from fieldcheck.validation.types import (
    ResolvedRule,
    RuleKind,
    is_collection,
    should_skip,
)

logger = logging.getLogger(__name__)


def _elements(value: Any) -> Iterable[Any]:
    """Iterate a collection's values (mappings yield values, not keys)."""
    if isinstance(value, (Vars, Mapping)):
        return value.values()
    return value


class Dispatcher:
    """Resolves and executes validity tests and filters against a registry."""

    def __init__(self, registry: RuleRegistry):
        self.registry = registry

    def resolve(
        self,
        name: Any,
        param: str | None = None,
        kind: RuleKind = RuleKind.TEST,
    ) -> ResolvedRule | None:
        """Resolve a rule name or inline callable.

        Args:
            name: Registered rule name, or a callable used inline
            param: Raw parameter string written after the rule name
            kind: Which namespace to look ``name`` up in

        Returns:
            The resolved rule, or None if ``name`` is neither registered nor callable
        """
        rule = self.registry.find(name, kind)
        if rule is not None:
            params = [param] if param is not None else []
            return ResolvedRule(callback=rule.callback, complex=rule.complex, params=params)

        if callable(name):
            params = str(param).split(" ") if param else []
            return ResolvedRule(callback=name, complex=False, params=params)

        logger.debug("%s '%s' is not registered", kind.value.capitalize(), name)
        return None

    def invoke(
        self,
        resolved: ResolvedRule,
        exists: bool,
        value: Any,
        on_skip: Any = True,
    ) -> Any:
        """Run a resolved rule against a value.

        Complex rules always run. Simple rules return ``on_skip`` without
        running when ``should_skip(exists, value)`` holds.
        """
        if not resolved.complex and should_skip(exists, value):
            return on_skip
        return resolved.evaluate(exists, value)

    # -------------------------------------------------------------------------
    # Validity tests
    # -------------------------------------------------------------------------

    def exec_test(
        self, exists: bool, value: Any, name: Any, param: str | None = None
    ) -> tuple[bool, Any]:
        """Run one test. Unresolved tests fail."""
        resolved = self.resolve(name, param)
        if resolved is None:
            return False, value
        return bool(self.invoke(resolved, exists, value)), value

    def exec_test_all(
        self, exists: bool, value: Any, name: Any, param: str | None = None
    ) -> tuple[bool, Any]:
        """Run a test on every element; pass only if all elements pass.

        Every element is tested with the outer ``exists`` flag. An empty
        collection passes; a non-collection fails.
        """
        resolved = self.resolve(name, param)
        if resolved is None or not is_collection(value):
            return False, value
        for element in _elements(value):
            if not self.invoke(resolved, exists, element):
                return False, value
        return True, value

    def exec_test_any(
        self, exists: bool, value: Any, name: Any, param: str | None = None
    ) -> tuple[bool, Any]:
        """Run a test on elements until one passes.

        An empty collection or a non-collection fails.
        """
        resolved = self.resolve(name, param)
        if resolved is None or not is_collection(value):
            return False, value
        for element in _elements(value):
            if self.invoke(resolved, exists, element):
                return True, value
        return False, value

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    def exec_filter(
        self, exists: bool, value: Any, name: Any, param: str | None = None
    ) -> tuple[bool, Any]:
        """Run a filter; its return value becomes the new value.

        An unresolved filter yields None as the new value.
        """
        resolved = self.resolve(name, param, RuleKind.FILTER)
        if resolved is None:
            logger.warning("Filter '%s' is not registered; value replaced by None", name)
            return True, None
        return True, self.invoke(resolved, exists, value, on_skip=value)

    def exec_filter_map(
        self, exists: bool, value: Any, name: Any, param: str | None = None
    ) -> tuple[bool, Any]:
        """Run a filter on every element, keeping order and container kind.

        A VarsList stays a VarsList and a tuple stays a tuple; other
        collections become lists. An unresolved filter or a non-collection
        yields None.
        """
        resolved = self.resolve(name, param, RuleKind.FILTER)
        if resolved is None or not is_collection(value):
            if resolved is None:
                logger.warning("Filter '%s' is not registered; value replaced by None", name)
            return True, None

        mapped = [self.invoke(resolved, exists, v, on_skip=v) for v in _elements(value)]
        if isinstance(value, VarsList):
            return True, VarsList.from_iterable(mapped)
        if isinstance(value, tuple):
            return True, tuple(mapped)
        return True, mapped

"""Rule registry for fieldcheck.

Provides registration and lookup for:
- Validity tests (name -> callback, message template, complex flag)
- Filters (name -> callback, complex flag)

Registries are plain instances rather than process-wide state: a Validator
receives one (or the default one built by ``create_default_registry``) and
copies it, so per-validator definitions never leak into other validators.
"""

from collections.abc import Hashable
from typing import Any, Callable

from fieldcheck.validation.types import NOT_REGISTERED, Rule, RuleKind


class RuleRegistry:
    """Registry for validity tests and filters.

    Tests and filters live in independent namespaces, so a test and a filter
    may share a name. Re-registering a name overwrites the previous rule.

    Example:
        registry = RuleRegistry()
        registry.define_test("even", lambda v: int(v) % 2 == 0, "Even numbers only.")
        registry.define_filter("upper", lambda v: str(v).upper())

        registry.is_defined("even")     # True
        registry.message_for("even")    # "Even numbers only."
    """

    def __init__(self) -> None:
        self._tests: dict[str, Rule] = {}
        self._filters: dict[str, Rule] = {}

    def define_test(
        self,
        name: str,
        callback: Callable[..., Any],
        message: str,
        complex: bool = False,
    ) -> None:
        """Register a validity test by name.

        Args:
            name: Name used in checks (e.g., "max-length")
            callback: Returns a truthy value when the value is valid. The parameter
                string is passed as a second argument only when one is written
            message: Error message template
            complex: Pass (exists, value[, param]) instead of (value[, param])
        """
        self._tests[name] = Rule(
            name=name,
            callback=callback,
            message=message,
            complex=complex,
            kind=RuleKind.TEST,
        )

    def define_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        complex: bool = False,
    ) -> None:
        """Register a filter by name. The callback returns the new value."""
        self._filters[name] = Rule(
            name=name,
            callback=callback,
            complex=complex,
            kind=RuleKind.FILTER,
        )

    def is_defined(self, name: Any) -> bool:
        """Check if a validity test is registered."""
        return isinstance(name, Hashable) and name in self._tests

    def is_filter_defined(self, name: Any) -> bool:
        """Check if a filter is registered."""
        return isinstance(name, Hashable) and name in self._filters

    def message_for(self, name: Any) -> str:
        """Return the message template of a test, or "not registered"."""
        if self.is_defined(name):
            return self._tests[name].message
        return NOT_REGISTERED

    def find(self, name: Any, kind: RuleKind = RuleKind.TEST) -> Rule | None:
        """Return the rule registered under ``name``, or None."""
        if kind == RuleKind.FILTER:
            return self._filters.get(name) if self.is_filter_defined(name) else None
        return self._tests.get(name) if self.is_defined(name) else None

    def get_test(self, name: str) -> Rule:
        """Get a registered validity test by name.

        Raises:
            ValueError: If the test is not registered
        """
        if not self.is_defined(name):
            raise ValueError(
                f"Validity test '{name}' is not registered. "
                "Available tests: " + ", ".join(self.list_tests())
            )
        return self._tests[name]

    def get_filter(self, name: str) -> Rule:
        """Get a registered filter by name.

        Raises:
            ValueError: If the filter is not registered
        """
        if not self.is_filter_defined(name):
            raise ValueError(
                f"Filter '{name}' is not registered. "
                "Available filters: " + ", ".join(self.list_filters())
            )
        return self._filters[name]

    def list_tests(self) -> list[str]:
        """List registered test names in registration order."""
        return list(self._tests.keys())

    def list_filters(self) -> list[str]:
        """List registered filter names in registration order."""
        return list(self._filters.keys())

    def copy(self) -> "RuleRegistry":
        """Return an independent registry holding the same rules."""
        other = RuleRegistry()
        other._tests = dict(self._tests)
        other._filters = dict(self._filters)
        return other

    def export_documentation(self) -> dict[str, Any]:
        """Export all rules for documentation or the CLI.

        Returns:
            Dict with "tests" and "filters", each a list of rule dicts
        """
        return {
            "tests": [rule.to_dict() for rule in self._tests.values()],
            "filters": [rule.to_dict() for rule in self._filters.values()],
        }


def create_default_registry() -> RuleRegistry:
    """Build a registry pre-populated with the built-in tests and filters."""
    from fieldcheck.validation.builtins import (
        register_builtin_filters,
        register_builtin_tests,
    )

    registry = RuleRegistry()
    register_builtin_tests(registry)
    register_builtin_filters(registry)
    return registry

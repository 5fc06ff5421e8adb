"""Core types for the fieldcheck validation system.

This module defines the types shared by the registry, the dispatcher and the
built-in rules:
- Rule: a registered validity test or filter
- ResolvedRule: a rule (or inline callable) ready to be invoked
- Emptiness helpers deciding when simple rules are skipped
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

# Message returned for rule names nobody registered
NOT_REGISTERED = "not registered"


class RuleKind(Enum):
    """The namespace a rule lives in."""

    TEST = "test"
    FILTER = "filter"


@dataclass(frozen=True)
class Rule:
    """A named validity test or filter.

    Attributes:
        name: Name the rule is looked up by (e.g., "max-length", "trim")
        callback: The callable doing the work
        message: Error message template (tests only; supports {param}, {value}, {label})
        complex: If True the callback receives (exists, value, *params) and
            handles emptiness itself; otherwise it receives (value, *params)
        kind: TEST or FILTER
    """

    name: str
    callback: Callable[..., Any]
    message: str = ""
    complex: bool = False
    kind: RuleKind = RuleKind.TEST

    def evaluate(self, exists: bool, value: Any, params: list[Any]) -> Any:
        """Call the callback with the argument shape selected by ``complex``."""
        if self.complex:
            return self.callback(exists, value, *params)
        return self.callback(value, *params)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "message": self.message,
            "complex": self.complex,
        }


@dataclass
class ResolvedRule:
    """A rule resolved by name or an inline callable, with its parameters."""

    callback: Callable[..., Any]
    complex: bool = False
    params: list[Any] = field(default_factory=list)

    def evaluate(self, exists: bool, value: Any) -> Any:
        if self.complex:
            return self.callback(exists, value, *self.params)
        return self.callback(value, *self.params)


# =============================================================================
# Emptiness
# =============================================================================


def is_collection(value: Any) -> bool:
    """Return True for iterable containers (strings and bytes excluded)."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, Iterable)


def is_meaningful_empty(value: Any) -> bool:
    """Return True for the empty-looking values that still count as present.

    These are the string "0", integer 0, False, and an empty collection.
    """
    if value is False:
        return True
    if isinstance(value, str):
        return value == "0"
    if isinstance(value, int) and not isinstance(value, bool):
        return value == 0
    if is_collection(value):
        return _collection_is_empty(value)
    return False


def is_blank(value: Any) -> bool:
    """Return True for conventionally empty values.

    None, "", "0", numeric zero, False and empty collections are blank.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (int, float)):
        return value == 0
    if is_collection(value):
        return _collection_is_empty(value)
    return False


def should_skip(exists: bool, value: Any) -> bool:
    """Decide whether a simple rule passes without running its callback."""
    return not exists or (is_blank(value) and not is_meaningful_empty(value))


def _collection_is_empty(value: Any) -> bool:
    try:
        return len(value) == 0
    except TypeError:
        # Sized-less iterables (generators) are never considered empty
        return False

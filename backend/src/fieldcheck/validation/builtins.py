"""Built-in validity tests and filters for fieldcheck.

This module registers the built-in rules with a RuleRegistry.
``create_default_registry()`` calls both register functions.

Tests:
- Presence: pass, fail, empty, not-empty (complex, see exists flag)
- String: max-length, min-length, alpha, alpha-numeric, match, not-match,
  email, url
- Choice: in, not-in
- Type: numeric, integer, array
- Comparison: ==, !=, >, >=, <, <=

Filters: trim, ltrim, rtrim

Parameters arrive as the raw string written after the rule name
("max-length 255" -> "255"), or None when nothing was written.
"""

import logging
import re
from decimal import Decimal
from typing import Any

from fieldcheck.validation.registry import RuleRegistry
from fieldcheck.validation.types import is_collection, is_meaningful_empty

logger = logging.getLogger(__name__)

NUMERIC_PATTERN = re.compile(
    r"^\s*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$"
)

# Host part after "@": label(.label)*
EMAIL_PATTERN = re.compile(
    r"@[A-Z0-9][A-Z0-9_-]*(\.[A-Z0-9][A-Z0-9_-]*)*$",
    re.IGNORECASE,
)

# scheme://host[:port][/...]
URL_PATTERN = re.compile(
    r"^[A-Z]+://([A-Z0-9][A-Z0-9_-]*(?:\.[A-Z0-9][A-Z0-9_-]*)*):?([0-9]+)?/?",
    re.IGNORECASE,
)

ALPHA_PATTERN = re.compile(r"[A-Za-z]+")
ALNUM_PATTERN = re.compile(r"[A-Za-z0-9]+")

# Characters removed by the trim filters
TRIM_CHARS = " \t\n\r\0\x0b"

_PATTERN_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,
}

_CLOSING_DELIMITERS = {"(": ")", "[": "]", "{": "}", "<": ">"}

DEFAULT_PATTERN = "/^$/"


def register_builtin_tests(registry: RuleRegistry) -> None:
    """Register all built-in validity tests with ``registry``."""
    _register_presence_tests(registry)
    _register_string_tests(registry)
    _register_choice_tests(registry)
    _register_type_tests(registry)
    _register_comparison_tests(registry)


def register_builtin_filters(registry: RuleRegistry) -> None:
    """Register all built-in filters with ``registry``."""
    registry.define_filter("trim", _filter_trim)
    registry.define_filter("ltrim", _filter_ltrim)
    registry.define_filter("rtrim", _filter_rtrim)


# -----------------------------------------------------------------------------
# Value helpers
# -----------------------------------------------------------------------------


def _to_text(value: Any) -> str:
    """String form used for lengths, patterns and loose comparison."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    if isinstance(value, str):
        return NUMERIC_PATTERN.match(value) is not None
    return False


def _to_number(value: Any) -> int | float | Decimal:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def _number_param(param: Any, default: int = 0) -> int | float | Decimal:
    if param is None or not _is_numeric(param):
        return default
    return _to_number(param)


def _compare(value: Any, other: Any) -> int:
    """Three-way loose comparison: numerically when both sides are numeric."""
    if _is_numeric(value) and _is_numeric(other):
        left, right = _to_number(value), _to_number(other)
    else:
        left, right = _to_text(value), _to_text(other)
    return (left > right) - (left < right)


def _loose_equals(value: Any, other: Any) -> bool:
    return _compare(value, other) == 0


def _compile_pattern(param: Any) -> re.Pattern[str]:
    """Compile "/body/flags" (any non-alphanumeric delimiter) or a bare regex.

    Raises:
        re.error: If the pattern is not a valid regular expression
    """
    source = DEFAULT_PATTERN if param is None else str(param)
    if len(source) >= 2 and not source[0].isalnum() and source[0] not in "\\ ":
        closing = _CLOSING_DELIMITERS.get(source[0], source[0])
        end = source.rfind(closing)
        if end > 0:
            modifiers = source[end + 1:]
            if all(m in _PATTERN_FLAGS for m in modifiers):
                flags = 0
                for m in modifiers:
                    flags |= _PATTERN_FLAGS[m]
                return re.compile(source[1:end], flags)
    return re.compile(source)


# -----------------------------------------------------------------------------
# Presence Tests (complex)
# -----------------------------------------------------------------------------


def _test_pass(exists: bool, value: Any, param: Any = None) -> bool:
    return True


def _test_fail(exists: bool, value: Any, param: Any = None) -> bool:
    return False


def _test_empty(exists: bool, value: Any, param: Any = None) -> bool:
    """Missing, None, "" and float zero are empty.

    "0", 0, False and empty collections are present values, not empty.
    """
    if not exists or value is None:
        return True
    if is_meaningful_empty(value):
        return False
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    return False


def _test_not_empty(exists: bool, value: Any, param: Any = None) -> bool:
    return not _test_empty(exists, value)


def _register_presence_tests(registry: RuleRegistry) -> None:
    registry.define_test("pass", _test_pass, "Valid.", complex=True)
    registry.define_test("fail", _test_fail, "Invalid.", complex=True)
    registry.define_test("empty", _test_empty, "Leave as empty.", complex=True)
    registry.define_test("not-empty", _test_not_empty, "Required.", complex=True)


# -----------------------------------------------------------------------------
# String Tests
# -----------------------------------------------------------------------------


def _test_max_length(value: Any, param: Any = None) -> bool:
    return len(_to_text(value)) <= _number_param(param)


def _test_min_length(value: Any, param: Any = None) -> bool:
    return len(_to_text(value)) >= _number_param(param)


def _test_alpha(value: Any, param: Any = None) -> bool:
    return isinstance(value, str) and ALPHA_PATTERN.fullmatch(value) is not None


def _test_alpha_numeric(value: Any, param: Any = None) -> bool:
    return isinstance(value, str) and ALNUM_PATTERN.fullmatch(value) is not None


def _test_match(value: Any, param: Any = None) -> bool:
    """Search ``value`` for the pattern; invalid patterns never match."""
    if is_collection(value):
        return False
    try:
        pattern = _compile_pattern(param)
    except re.error as e:
        logger.warning("Invalid pattern %r for match test: %s", param, e)
        return False
    return pattern.search(_to_text(value)) is not None


def _test_not_match(value: Any, param: Any = None) -> bool:
    return not _test_match(value, param)


def _test_email(value: Any, param: Any = None) -> bool:
    return EMAIL_PATTERN.search(_to_text(value)) is not None


def _test_url(value: Any, param: Any = None) -> bool:
    return URL_PATTERN.match(_to_text(value)) is not None


def _register_string_tests(registry: RuleRegistry) -> None:
    registry.define_test("max-length", _test_max_length, "In {param} letters.")
    registry.define_test("min-length", _test_min_length, "At least {param} letters.")
    registry.define_test("alpha", _test_alpha, "Alphabet only.")
    registry.define_test("alpha-numeric", _test_alpha_numeric, "Alphabet or number.")
    registry.define_test("match", _test_match, "Invalid pattern.")
    registry.define_test("not-match", _test_not_match, "Not allowed pattern.")
    registry.define_test("email", _test_email, "Email only.")
    registry.define_test("url", _test_url, "URL only.")


# -----------------------------------------------------------------------------
# Choice Tests
# -----------------------------------------------------------------------------


def _test_in(value: Any, param: Any = None) -> bool:
    """Loosely equal to one of the comma-separated choices in ``param``."""
    choices = _to_text(param).split(",")
    return any(_loose_equals(value, choice.strip()) for choice in choices)


def _test_not_in(value: Any, param: Any = None) -> bool:
    return not _test_in(value, param)


def _register_choice_tests(registry: RuleRegistry) -> None:
    registry.define_test("in", _test_in, "Choose in {param}.")
    registry.define_test("not-in", _test_not_in, "Choose else of {param}.")


# -----------------------------------------------------------------------------
# Type Tests
# -----------------------------------------------------------------------------


def _test_numeric(value: Any, param: Any = None) -> bool:
    return _is_numeric(value)


def _test_integer(value: Any, param: Any = None) -> bool:
    """Only native integers pass; "20" is numeric but not an integer."""
    return isinstance(value, int) and not isinstance(value, bool)


def _test_array(value: Any, param: Any = None) -> bool:
    return is_collection(value)


def _register_type_tests(registry: RuleRegistry) -> None:
    registry.define_test("numeric", _test_numeric, "By number.")
    registry.define_test("integer", _test_integer, "By integer number.")
    registry.define_test("array", _test_array, "By Array.")


# -----------------------------------------------------------------------------
# Comparison Tests
# -----------------------------------------------------------------------------


def _test_equal(value: Any, param: Any = None) -> bool:
    return _loose_equals(value, param)


def _test_not_equal(value: Any, param: Any = None) -> bool:
    return not _loose_equals(value, param)


def _test_greater_than(value: Any, param: Any = None) -> bool:
    return _compare(value, 0 if param is None else param) > 0


def _test_greater_than_or_equal(value: Any, param: Any = None) -> bool:
    return _compare(value, 0 if param is None else param) >= 0


def _test_less_than(value: Any, param: Any = None) -> bool:
    return _compare(value, 0 if param is None else param) < 0


def _test_less_than_or_equal(value: Any, param: Any = None) -> bool:
    return _compare(value, 0 if param is None else param) <= 0


def _register_comparison_tests(registry: RuleRegistry) -> None:
    registry.define_test("==", _test_equal, "Should equal to {param}.")
    registry.define_test("!=", _test_not_equal, "Should not equal to {param}.")
    registry.define_test(">", _test_greater_than, "Greater than {param}.")
    registry.define_test(">=", _test_greater_than_or_equal, "Greater than or equals to {param}.")
    registry.define_test("<", _test_less_than, "Less than {param}.")
    registry.define_test("<=", _test_less_than_or_equal, "Less than or equals to {param}.")


# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------


def _filter_trim(value: Any, param: Any = None) -> str:
    return _to_text(value).strip(TRIM_CHARS)


def _filter_ltrim(value: Any, param: Any = None) -> str:
    return _to_text(value).lstrip(TRIM_CHARS)


def _filter_rtrim(value: Any, param: Any = None) -> str:
    return _to_text(value).rstrip(TRIM_CHARS)

"""Tests for rule resolution and dispatch.

Tests cover:
- resolve: registered names, inline callables, unresolved names
- Skipping of simple rules on missing/empty values
- all/any quantifiers
- Filters and element-wise filter maps
"""

import pytest

from fieldcheck.core.vars import Vars, VarsList
from fieldcheck.validation.dispatcher import Dispatcher
from fieldcheck.validation.registry import create_default_registry
from fieldcheck.validation.types import RuleKind


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def dispatcher(registry):
    return Dispatcher(registry)


@pytest.fixture
def calls(registry):
    """Register recording rules and return the list of values they saw."""
    seen = []

    def record(value, param=None):
        seen.append(value)
        return value != "bad"

    def shout(value, param=None):
        seen.append(value)
        return str(value).upper()

    registry.define_test("record", record, "Recorded.")
    registry.define_filter("shout", shout)
    return seen


# =============================================================================
# Resolution
# =============================================================================


class TestResolve:
    """Tests for Dispatcher.resolve."""

    def test_registered_name_gets_raw_param(self, dispatcher):
        resolved = dispatcher.resolve("in", "a b, c")
        assert resolved.complex is False
        assert resolved.params == ["a b, c"]

    def test_registered_name_without_param(self, dispatcher):
        resolved = dispatcher.resolve("not-empty")
        assert resolved.complex is True
        assert resolved.params == []

    def test_inline_callable_splits_params_on_spaces(self, dispatcher):
        def between(value, lo, hi):
            return int(lo) <= int(value) <= int(hi)

        resolved = dispatcher.resolve(between, "1 10")
        assert resolved.callback is between
        assert resolved.complex is False
        assert resolved.params == ["1", "10"]

    def test_one_argument_rules_run_without_param(self, dispatcher, registry):
        registry.define_test("upper", lambda v: v.isupper(), "Upper only.")
        registry.define_filter("lower", lambda v: v.lower())

        assert dispatcher.exec_test(True, "AB", "upper") == (True, "AB")
        assert dispatcher.exec_filter(True, "AB", "lower") == (True, "ab")
        assert dispatcher.exec_filter_map(True, ["A", "B"], "lower") == (True, ["a", "b"])

    def test_inline_callable_without_param(self, dispatcher):
        assert dispatcher.resolve(str.isdigit).params == []
        assert dispatcher.resolve(str.isdigit, "").params == []

    def test_unknown_name_is_unresolved(self, dispatcher):
        assert dispatcher.resolve("no-such-test") is None

    def test_filter_namespace(self, dispatcher):
        assert dispatcher.resolve("trim", kind=RuleKind.FILTER) is not None
        assert dispatcher.resolve("trim") is None


# =============================================================================
# Skipping simple rules
# =============================================================================


class TestSkip:
    """Tests for the missing/empty short-circuit."""

    def test_missing_field_passes_every_simple_test(self, dispatcher, registry):
        simple = [n for n in registry.list_tests() if not registry.get_test(n).complex]
        assert simple
        for name in simple:
            assert dispatcher.exec_test(False, "value", name, "1") == (True, "value")

    @pytest.mark.parametrize("value", [None, "", 0.0])
    def test_empty_values_skip_callback(self, dispatcher, calls, value):
        assert dispatcher.exec_test(True, value, "record") == (True, value)
        assert calls == []

    @pytest.mark.parametrize("value", ["0", 0, False, []])
    def test_meaningful_empties_reach_callback(self, dispatcher, calls, value):
        dispatcher.exec_test(True, value, "record")
        assert calls == [value]

    def test_complex_rule_runs_for_missing_field(self, dispatcher):
        assert dispatcher.exec_test(False, None, "not-empty") == (False, None)

    def test_unregistered_test_fails_closed(self, dispatcher):
        assert dispatcher.exec_test(True, "x", "no-such-test") == (False, "x")
        assert dispatcher.exec_test(False, None, "no-such-test") == (False, None)

    def test_inline_callable_receives_params(self, dispatcher):
        def between(value, lo, hi):
            return int(lo) <= int(value) <= int(hi)

        assert dispatcher.exec_test(True, "5", between, "1 10") == (True, "5")
        assert dispatcher.exec_test(True, "50", between, "1 10") == (False, "50")

    def test_callback_errors_propagate(self, dispatcher):
        with pytest.raises(ZeroDivisionError):
            dispatcher.exec_test(True, 1, lambda v: v / 0)


# =============================================================================
# Quantifiers
# =============================================================================


class TestQuantifiers:
    """Tests for exec_test_all and exec_test_any."""

    def test_all(self, dispatcher):
        assert dispatcher.exec_test_all(True, ["1", "2"], "numeric") == (True, ["1", "2"])
        assert dispatcher.exec_test_all(True, ["1", "x"], "numeric")[0] is False

    def test_all_of_empty_collection_passes(self, dispatcher):
        assert dispatcher.exec_test_all(True, [], "numeric") == (True, [])

    def test_all_stops_at_first_failure(self, dispatcher, calls):
        passed, _ = dispatcher.exec_test_all(True, ["a", "bad", "c"], "record")
        assert passed is False
        assert calls == ["a", "bad"]

    def test_any(self, dispatcher):
        assert dispatcher.exec_test_any(True, ["x", "1"], "numeric")[0] is True
        assert dispatcher.exec_test_any(True, ["x", "y"], "numeric")[0] is False

    def test_any_of_empty_collection_fails(self, dispatcher):
        assert dispatcher.exec_test_any(True, [], "numeric") == (False, [])

    def test_any_stops_at_first_success(self, dispatcher, calls):
        passed, _ = dispatcher.exec_test_any(True, ["bad", "ok", "more"], "record")
        assert passed is True
        assert calls == ["bad", "ok"]

    def test_non_collection_fails(self, dispatcher):
        assert dispatcher.exec_test_all(True, "abc", "pass") == (False, "abc")
        assert dispatcher.exec_test_any(True, 5, "pass") == (False, 5)

    def test_unregistered_rule_fails(self, dispatcher):
        assert dispatcher.exec_test_all(True, [], "no-such-test")[0] is False
        assert dispatcher.exec_test_any(True, ["x"], "no-such-test")[0] is False

    def test_elements_share_the_outer_exists_flag(self, dispatcher, calls):
        # A missing field skips every element of a simple rule
        assert dispatcher.exec_test_all(False, ["bad"], "record") == (True, ["bad"])
        assert calls == []

    def test_mappings_are_tested_by_value(self, dispatcher):
        assert dispatcher.exec_test_all(True, {"x": "1", "y": "2"}, "numeric")[0] is True
        assert dispatcher.exec_test_all(True, Vars.from_dict({"1": "a"}), "numeric")[0] is False


# =============================================================================
# Filters
# =============================================================================


class TestFilter:
    """Tests for exec_filter and exec_filter_map."""

    def test_filter_replaces_value(self, dispatcher):
        assert dispatcher.exec_filter(True, "  a ", "trim") == (True, "a")

    def test_unregistered_filter_yields_none(self, dispatcher):
        assert dispatcher.exec_filter(True, "keep me", "no-such-filter") == (True, None)

    def test_skipped_filter_keeps_value(self, dispatcher, calls):
        assert dispatcher.exec_filter(True, "", "shout") == (True, "")
        assert dispatcher.exec_filter(False, "x", "shout") == (True, "x")
        assert calls == []

    def test_inline_filter(self, dispatcher):
        assert dispatcher.exec_filter(True, "abc", lambda v, n: v[: int(n)], "2") == (True, "ab")

    def test_map_over_list(self, dispatcher):
        assert dispatcher.exec_filter_map(True, [" a", "b "], "trim") == (True, ["a", "b"])

    def test_map_keeps_container_kind(self, dispatcher):
        _, mapped = dispatcher.exec_filter_map(True, VarsList.from_iterable([" a"]), "trim")
        assert isinstance(mapped, VarsList)
        assert mapped == ["a"]

        _, mapped = dispatcher.exec_filter_map(True, (" a", " b"), "trim")
        assert mapped == ("a", "b")

    def test_map_over_mapping_yields_values(self, dispatcher):
        assert dispatcher.exec_filter_map(True, {"k": " v"}, "trim") == (True, ["v"])

    def test_map_keeps_skipped_elements(self, dispatcher, calls):
        assert dispatcher.exec_filter_map(True, ["a", "", None], "shout") == (True, ["A", "", None])
        assert calls == ["a"]

    def test_map_of_non_collection_yields_none(self, dispatcher):
        assert dispatcher.exec_filter_map(True, "abc", "trim") == (True, None)

    def test_map_with_unregistered_filter_yields_none(self, dispatcher):
        assert dispatcher.exec_filter_map(True, ["a"], "no-such-filter") == (True, None)

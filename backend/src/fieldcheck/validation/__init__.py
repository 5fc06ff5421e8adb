"""fieldcheck validation system.

Rule-based checking and filtering of request-like data (form fields):
- Registry: named validity tests and filters (built-ins pre-populated)
- Dispatcher: resolves rules or inline callables and applies them
- ValidationContext: per-field chain of checks and filters
- Validator: facade producing result/errors/values views

Usage:
    from fieldcheck.validation import Validator

    validator = Validator({"name": " Al ", "age": "20"})
    validator.check("name").filter("trim").is_("not-empty").is_("max-length 255")
    validator.check("age").is_("not-empty").is_("numeric")

    validator.valid            # True
    validator.values.get("name")  # "Al"
"""

from fieldcheck.validation.context import ValidationContext
from fieldcheck.validation.dispatcher import Dispatcher
from fieldcheck.validation.registry import RuleRegistry, create_default_registry
from fieldcheck.validation.ruleset import FieldRules, RuleSet, RuleSetError, RuleStep
from fieldcheck.validation.types import (
    NOT_REGISTERED,
    ResolvedRule,
    Rule,
    RuleKind,
    is_blank,
    is_collection,
    is_meaningful_empty,
    should_skip,
)
from fieldcheck.validation.validator import Validator

__all__ = [
    # Types
    "NOT_REGISTERED",
    "ResolvedRule",
    "Rule",
    "RuleKind",
    "is_blank",
    "is_collection",
    "is_meaningful_empty",
    "should_skip",
    # Registry
    "RuleRegistry",
    "create_default_registry",
    # Dispatch
    "Dispatcher",
    # Facade
    "ValidationContext",
    "Validator",
    # Rule sets
    "FieldRules",
    "RuleSet",
    "RuleSetError",
    "RuleStep",
]

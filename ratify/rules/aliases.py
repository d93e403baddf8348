"""Alias rules in the style of Backbone.Validation.

Each one is a pure delegation to a canonical rule, resolved through the
registry it was looked up from, so overriding a canonical rule also changes
every alias built on it. Validators built from an alias still report the
alias name (``{"range": True}``), never the rule it delegates to.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ratify.rules.options import parse_bounds, parse_length_bounds

if TYPE_CHECKING:
    from ratify.registry import Check, RuleRegistry


def equal_to(registry: RuleRegistry, other_path: Any) -> Check:
    return registry.build("confirmation", other_path)


def max_(registry: RuleRegistry, maximum: Any) -> Check:
    return registry.build("numericality", {"less_than_or_equal_to": maximum})


def min_(registry: RuleRegistry, minimum: Any) -> Check:
    return registry.build("numericality", {"greater_than_or_equal_to": minimum})


def max_length(registry: RuleRegistry, maximum: Any) -> Check:
    return registry.build("length", {"maximum": maximum})


def min_length(registry: RuleRegistry, minimum: Any) -> Check:
    return registry.build("length", {"minimum": minimum})


def one_of(registry: RuleRegistry, options: Any) -> Check:
    return registry.build("inclusion", {"in": options})


def pattern(registry: RuleRegistry, regex: Any) -> Check:
    return registry.build("format", {"with": regex})


def range_(registry: RuleRegistry, bounds: Any) -> Check:
    """Inclusive numeric range: ``[low, high]``."""
    low, high = parse_bounds("range", bounds)
    return registry.build("numericality", {"greater_than_or_equal_to": low, "less_than_or_equal_to": high})


def range_length(registry: RuleRegistry, bounds: Any) -> Check:
    """Inclusive string-length range: ``[low, high]``."""
    low, high = parse_length_bounds("range_length", bounds)
    return registry.build("length", {"minimum": low, "maximum": high})


def required(registry: RuleRegistry, config: Any) -> Check:
    return registry.build("presence", config)


ALIAS_RULES = {
    "equal_to": equal_to,
    "max": max_,
    "max_length": max_length,
    "min": min_,
    "min_length": min_length,
    "one_of": one_of,
    "pattern": pattern,
    "range": range_,
    "range_length": range_length,
    "required": required,
    # camelCase names, for rule specifications shared with JavaScript clients
    "equalTo": equal_to,
    "maxLength": max_length,
    "minLength": min_length,
    "oneOf": one_of,
    "rangeLength": range_length,
}

"""Built-in validation rules, modeled after ActiveModel's validators.

Each factory takes ``(registry, config)`` and returns an async check
``(attrs, attr_name)`` that raises ValidationError on failure. They are the
building blocks the aliases in ``ratify.rules.aliases`` are composed from.

- absence
- acceptance
- confirmation
- exclusion
- format
- inclusion
- length
- numericality
- presence
"""
from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from ratify.errors import reject_unless
from ratify.paths import deep_get
from ratify.rules.options import (
    AcceptanceOptions,
    FormatOptions,
    LengthOptions,
    MembershipOptions,
    NumericalityOptions,
)

if TYPE_CHECKING:
    from ratify.registry import Check, RuleRegistry

NUMERIC_STRING = re.compile(r"-?(?:[0-9]+|[0-9]{1,3}(?:,[0-9]{3})+)(?:\.[0-9]+)?")


def is_empty(value: Any) -> bool:
    """True for None, a blank string, or an empty list/tuple."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def to_number(value: Any) -> int | float | Decimal | None:
    """Parse a number or numeric string ("12,345.6"); None if not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        return value if math.isfinite(value) else None
    if isinstance(value, str) and NUMERIC_STRING.fullmatch(value):
        text = value.replace(",", "")
        return float(text) if "." in text else int(text)
    return None


def is_integer(number: int | float | Decimal) -> bool:
    return isinstance(number, int) or number == int(number)


def same_value(a: Any, b: Any) -> bool:
    """Equality that keeps booleans apart from the numbers 0 and 1."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    return a == b


def contains(collection: list[Any], value: Any) -> bool:
    return any(same_value(item, value) for item in collection)


def presence(registry: RuleRegistry, required: Any) -> Check:
    """Fails if required and the value is None, blank, or an empty list."""
    async def check(attrs: Any, attr_name: str) -> None:
        reject_unless(not (required and is_empty(deep_get(attrs, attr_name))))
    return check


def absence(registry: RuleRegistry, required: Any) -> Check:
    """Fails if required and the value is anything but empty."""
    async def check(attrs: Any, attr_name: str) -> None:
        reject_unless(not (required and not is_empty(deep_get(attrs, attr_name))))
    return check


def acceptance(registry: RuleRegistry, config: Any) -> Check:
    """Passes if the value is one of ``accept`` (default: True, "true", 1, "1")."""
    options = AcceptanceOptions.parse("acceptance", config)
    return registry.build("inclusion", {"in": options.accept})


def confirmation(registry: RuleRegistry, other_path: Any) -> Check:
    """Passes if the value equals the value at ``other_path``.

    e.g. ``{"password_confirmation": {"confirmation": "password"}}``
    """
    async def check(attrs: Any, attr_name: str) -> None:
        reject_unless(same_value(deep_get(attrs, attr_name), deep_get(attrs, other_path)))
    return check


def inclusion(registry: RuleRegistry, config: Any) -> Check:
    options = MembershipOptions.parse("inclusion", config)

    async def check(attrs: Any, attr_name: str) -> None:
        reject_unless(contains(options.in_, deep_get(attrs, attr_name)))
    return check


def exclusion(registry: RuleRegistry, config: Any) -> Check:
    options = MembershipOptions.parse("exclusion", config)

    async def check(attrs: Any, attr_name: str) -> None:
        reject_unless(not contains(options.in_, deep_get(attrs, attr_name)))
    return check


def format_rule(registry: RuleRegistry, config: Any) -> Check:
    """Value must match ``with`` (if given) and must not match ``without``.

    Matching is a search anywhere in the string. Non-string values are not
    converted to text and never match, so they fail ``with`` and pass
    ``without``: ``{"pattern": r"^\\d+$"}`` rejects the number ``123``.
    Use ``numericality`` for numbers.
    """
    options = FormatOptions.parse("format", config)

    async def check(attrs: Any, attr_name: str) -> None:
        value = deep_get(attrs, attr_name)
        text = value if isinstance(value, str) else None
        if options.with_ is not None:
            reject_unless(text is not None and options.with_.search(text))
        if options.without is not None:
            reject_unless(text is None or not options.without.search(text))
    return check


def length(registry: RuleRegistry, config: Any) -> Check:
    """String length checks: ``is``, ``minimum``, ``maximum``, ``range`` (inclusive)."""
    options = LengthOptions.parse("length", config)

    async def check(attrs: Any, attr_name: str) -> None:
        value = deep_get(attrs, attr_name)
        reject_unless(isinstance(value, str))
        size = len(value)
        if options.is_ is not None:
            reject_unless(size == options.is_)
        if options.minimum is not None:
            reject_unless(size >= options.minimum)
        if options.maximum is not None:
            reject_unless(size <= options.maximum)
        if options.range is not None:
            low, high = options.range
            reject_unless(low <= size <= high)
    return check


def numericality(registry: RuleRegistry, config: Any) -> Check:
    """Value must be numeric; every configured bound and flag must also hold.

    Numeric strings (including comma-grouped ones) are parsed before any
    comparison, so ``"12,345.6"`` satisfies ``{"greater_than": 12000}``.
    """
    options = NumericalityOptions.parse("numericality", config)

    async def check(attrs: Any, attr_name: str) -> None:
        number = to_number(deep_get(attrs, attr_name))
        reject_unless(number is not None)
        if options.greater_than is not None:
            reject_unless(number > options.greater_than)
        if options.greater_than_or_equal_to is not None:
            reject_unless(number >= options.greater_than_or_equal_to)
        if options.equal_to is not None:
            reject_unless(number == options.equal_to)
        if options.less_than_or_equal_to is not None:
            reject_unless(number <= options.less_than_or_equal_to)
        if options.less_than is not None:
            reject_unless(number < options.less_than)
        if options.other_than is not None:
            reject_unless(number != options.other_than)
        if options.only_integer:
            reject_unless(is_integer(number))
        if options.even:
            reject_unless(is_integer(number) and int(number) % 2 == 0)
        if options.odd:
            reject_unless(is_integer(number) and int(number) % 2 == 1)
    return check


BUILTIN_RULES = {
    "absence": absence,
    "acceptance": acceptance,
    "confirmation": confirmation,
    "exclusion": exclusion,
    "format": format_rule,
    "inclusion": inclusion,
    "length": length,
    "numericality": numericality,
    "presence": presence,
}

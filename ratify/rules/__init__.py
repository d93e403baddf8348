"""Built-in rule catalog: canonical rules plus the aliases built on them."""
from __future__ import annotations

from typing import TYPE_CHECKING

from .aliases import ALIAS_RULES
from .builtins import BUILTIN_RULES, is_empty, to_number
from .options import (
    AcceptanceOptions,
    FormatOptions,
    LengthOptions,
    MembershipOptions,
    NumericalityOptions,
    RuleOptions,
)

if TYPE_CHECKING:
    from ratify.registry import RuleRegistry


def register_builtins(registry: RuleRegistry) -> None:
    """Add the built-ins the same way users add their own rules."""
    for name, factory in {**BUILTIN_RULES, **ALIAS_RULES}.items():
        registry.register(name, factory)


__all__ = [
    "ALIAS_RULES",
    "BUILTIN_RULES",
    "register_builtins",
    "is_empty",
    "to_number",
    "RuleOptions",
    "AcceptanceOptions",
    "FormatOptions",
    "LengthOptions",
    "MembershipOptions",
    "NumericalityOptions",
]

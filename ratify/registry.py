"""Rule Registry

Maps rule names to factories. Factories receive the registry they were
looked up from, so one rule can be built out of another:

    def range_rule(registry, bounds):
        low, high = bounds
        return registry.build("numericality", {"greater_than_or_equal_to": low,
                                               "less_than_or_equal_to": high})

Registering an existing name replaces it silently (a debug event is logged).
"""
from __future__ import annotations

from functools import partial
from typing import Any, Awaitable, Callable, Iterator, Mapping, Union

from ratify.config import get_settings
from ratify.errors import UnknownRuleError
from ratify.logging import registry_logger

Check = Callable[[Any, str], Union[Awaitable[Any], Any]]
RuleFactory = Callable[["RuleRegistry", Any], Check]


class RuleRegistry:
    """Instance-scoped table of rule name -> factory.

    Use distinct instances for isolation; ``default_registry()`` returns the
    process-wide one used when combinators are not handed a registry.
    """

    def __init__(self, rules: Mapping[str, RuleFactory] | None = None):
        self._factories: dict[str, RuleFactory] = {}
        for name, factory in (rules or {}).items():
            self.register(name, factory)

    @classmethod
    def with_builtins(cls) -> RuleRegistry:
        """A fresh registry carrying the built-in rule catalog."""
        from ratify.rules import register_builtins

        registry = cls()
        register_builtins(registry)
        return registry

    def register(self, name: str, factory: RuleFactory) -> None:
        """Add or replace the factory for ``name``."""
        if not callable(factory):
            raise TypeError(f"rule factory for {name!r} must be callable, got {type(factory).__name__}")
        replaced = name in self._factories
        self._factories[name] = factory
        if replaced and get_settings().LOG_RULE_OVERRIDES:
            registry_logger().debug("rule_registered", rule=name, replaced=True)

    def lookup(self, name: str) -> Callable[[Any], Check]:
        """Return the factory for ``name`` bound to this registry."""
        try:
            factory = self._factories[name]
        except KeyError:
            raise UnknownRuleError(name) from None
        return partial(factory, self)

    def build(self, name: str, config: Any = None) -> Check:
        """Build a check for ``name`` configured with ``config``."""
        return self.lookup(name)(config)

    def copy(self) -> RuleRegistry:
        return RuleRegistry(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        return f"RuleRegistry({len(self._factories)} rules)"


# Built-ins are registered once, at import
_DEFAULT = RuleRegistry.with_builtins()


def default_registry() -> RuleRegistry:
    """Process-wide registry used when combinators are not given one."""
    return _DEFAULT


def resolve_registry(registry: RuleRegistry | None) -> RuleRegistry:
    # an empty registry is falsy, so test for None explicitly
    return default_registry() if registry is None else registry


def register_rule(name: str, factory: RuleFactory, *, registry: RuleRegistry | None = None) -> None:
    """Register ``factory`` under ``name`` (default registry unless one is given)."""
    resolve_registry(registry).register(name, factory)

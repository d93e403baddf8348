"""Validator Composition

Rule specifications are turned into validator objects once, then awaited
many times with concrete data:

    validate_user = get_model_validator({
        "username": {"presence": True},
        "password": {"presence": True, "length": {"minimum": 5}},
        "email": {"format": r"^\\w+@\\w+\\.\\w+$"},
    })

    await validate_user(attrs)             # all attributes
    await validate_user(attrs, ["email"])  # a subset

Three levels, one error shape:
- RuleValidator raises ValidationError({rule: True})
- AttributeValidator raises ValidationError({rule: True, ...})
- ModelValidator raises ValidationError({attr: {rule: True, ...}, ...})

Children at each level run concurrently and are all settled before the
outcome is decided, so every failing rule and attribute is reported at once.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ratify.errors import ErrorCode, UnknownRuleError, ValidationError, join_keys
from ratify.logging import engine_logger
from ratify.registry import Check, RuleRegistry, resolve_registry
from ratify.settle import settle

RuleSpecification = Mapping[str, Any]
ModelRuleSpecification = Mapping[str, RuleSpecification]


def _select(validators: Mapping[str, Any], names: Iterable[str] | None) -> dict[str, Any]:
    """Pick validators by name in specification order; no names means all."""
    if isinstance(names, str):
        names = [names]
    wanted = set(names) if names is not None else set()
    return {name: v for name, v in validators.items() if not wanted or name in wanted}


@dataclass(frozen=True, slots=True)
class RuleValidator:
    """Runs one rule against one attribute.

    Any failure of the underlying check, however deeply it was composed,
    is reported under ``rule_name`` alone.
    """
    rule_name: str
    check: Check

    async def __call__(self, attrs: Any, attr_name: str) -> None:
        try:
            result = self.check(attrs, attr_name)
            if inspect.isawaitable(result):
                result = await result
        except ValidationError as e:
            raise self._failure() from e
        except Exception as e:
            engine_logger().warning("check_crashed", rule=self.rule_name, attribute=attr_name,
                error_type=type(e).__name__, error=str(e))
            raise self._failure() from e
        if result is False:
            raise self._failure()

    def _failure(self) -> ValidationError:
        return ValidationError(f"failed validation: {self.rule_name}", {self.rule_name: True},
            code=ErrorCode.E2001_RULE_FAILED)


@dataclass(frozen=True, slots=True)
class AttributeValidator:
    """Runs every (or a subset of) rule for one attribute."""
    attribute_name: str
    validators: Mapping[str, RuleValidator]

    @property
    def rule_names(self) -> list[str]:
        return list(self.validators)

    async def __call__(self, attrs: Any, rule_names: Iterable[str] | None = None) -> None:
        selected = _select(self.validators, rule_names)
        result = await settle({name: v(attrs, self.attribute_name) for name, v in selected.items()})
        if result.has_failures:
            detail = result.merged_detail()
            engine_logger().debug("attribute_invalid", attribute=self.attribute_name,
                rules=list(detail), duration_ms=round(result.duration_ms, 2))
            raise ValidationError(f'attribute "{self.attribute_name}" failed validation: {join_keys(detail)}',
                detail, code=ErrorCode.E2002_ATTRIBUTE_INVALID)

    async def errors(self, attrs: Any, rule_names: Iterable[str] | None = None) -> dict[str, Any]:
        """Non-raising form: the failure detail, or ``{}`` if every rule passed."""
        try:
            await self(attrs, rule_names)
        except ValidationError as e:
            return e.detail
        return {}


@dataclass(frozen=True, slots=True)
class ModelValidator:
    """Runs every (or a subset of) attribute validator for one object."""
    validators: Mapping[str, AttributeValidator]

    @property
    def attribute_names(self) -> list[str]:
        return list(self.validators)

    def validator_for(self, attribute_name: str) -> AttributeValidator:
        return self.validators[attribute_name]

    async def __call__(self, attrs: Any, attribute_names: Iterable[str] | None = None) -> None:
        selected = _select(self.validators, attribute_names)
        result = await settle({name: v(attrs) for name, v in selected.items()})
        if result.has_failures:
            detail = result.detail()
            engine_logger().debug("model_invalid", attributes=list(detail),
                duration_ms=round(result.duration_ms, 2))
            raise ValidationError(f"model failed validation: {join_keys(detail)}",
                detail, code=ErrorCode.E2003_MODEL_INVALID)

    async def errors(self, attrs: Any, attribute_names: Iterable[str] | None = None) -> dict[str, Any]:
        """Non-raising form: the failure detail, or ``{}`` if every attribute passed."""
        try:
            await self(attrs, attribute_names)
        except ValidationError as e:
            return e.detail
        return {}


def get_validator(rule_name: str, config: Any = None, *, registry: RuleRegistry | None = None) -> RuleValidator:
    """Build a validator for a single rule.

    If ``rule_name`` is registered, its factory is configured with ``config``.
    Otherwise ``config`` may itself be a check ``(attrs, attr_name)`` used
    inline; it fails by raising ValidationError or returning False, and may
    be sync or async.

    Raises:
        UnknownRuleError: the rule is unregistered and ``config`` is not callable.
        InvalidRuleOptionsError: a built-in rule could not normalize ``config``.
    """
    registry = resolve_registry(registry)
    if rule_name in registry:
        check = registry.build(rule_name, config)
    elif callable(config):
        check = config
    else:
        raise UnknownRuleError(rule_name)
    engine_logger().debug("validator_built", rule=rule_name, inline=rule_name not in registry)
    return RuleValidator(rule_name, check)


def get_attribute_validator(
    attribute_name: str,
    rules: RuleSpecification,
    *,
    registry: RuleRegistry | None = None,
) -> AttributeValidator:
    """Build a validator checking ``attribute_name`` against every rule in ``rules``.

    e.g. ``get_attribute_validator("age", {"presence": True, "numericality": {"only_integer": True}})``
    """
    registry = resolve_registry(registry)
    validators = {name: get_validator(name, config, registry=registry) for name, config in rules.items()}
    return AttributeValidator(attribute_name, MappingProxyType(validators))


def get_model_validator(
    rules: ModelRuleSpecification,
    *,
    registry: RuleRegistry | None = None,
) -> ModelValidator:
    """Build a validator checking a whole object against ``rules``.

    ``rules`` maps attribute names (dotted paths allowed) to rule specifications.
    """
    registry = resolve_registry(registry)
    validators = {
        name: get_attribute_validator(name, attribute_rules, registry=registry)
        for name, attribute_rules in rules.items()
    }
    return ModelValidator(MappingProxyType(validators))

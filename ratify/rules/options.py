"""Option models for the built-in rules.

Every built-in normalizes its configuration here, once, when the validator is
built. Shorthand forms (a bare number, a list, a pattern) are expanded to the
canonical options shape; both snake_case and camelCase keys are accepted.
Anything that does not fit raises InvalidRuleOptionsError at build time.
"""
from __future__ import annotations

import re
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ratify.errors import InvalidRuleOptionsError

Number = int | float

M = TypeVar("M", bound="RuleOptions")

_BOUNDS = TypeAdapter(tuple[Number, Number])
_LENGTH_BOUNDS = TypeAdapter(tuple[int, int])


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


class RuleOptions(BaseModel):
    """Base for option models: immutable, strict about unknown keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    @classmethod
    def shorthand(cls, config: Any) -> Any:
        """Expand a shorthand configuration into a mapping. Override per rule."""
        return {} if config is None or isinstance(config, bool) else config

    @classmethod
    def parse(cls: type[M], rule_name: str, config: Any) -> M:
        try:
            return cls.model_validate(cls.shorthand(config))
        except PydanticValidationError as e:
            raise InvalidRuleOptionsError(rule_name, config, e.errors()[0]["msg"]) from e


class MembershipOptions(RuleOptions):
    """inclusion / exclusion: ``[1, 2, 3]`` or ``{"in": [1, 2, 3]}``."""
    in_: list[Any] = Field(default_factory=list, alias="in")

    @classmethod
    def shorthand(cls, config: Any) -> Any:
        if isinstance(config, (list, tuple, set, frozenset)):
            return {"in": list(config)}
        return super().shorthand(config)

    @field_validator("in_", mode="before")
    @classmethod
    def listify_in(cls, value: Any) -> Any:
        return _as_list(value)


class AcceptanceOptions(RuleOptions):
    accept: list[Any] = Field(default_factory=lambda: [True, "true", 1, "1"])

    @classmethod
    def shorthand(cls, config: Any) -> Any:
        if isinstance(config, (list, tuple)):
            return {"accept": list(config)}
        return config if isinstance(config, dict) else {}

    @field_validator("accept", mode="before")
    @classmethod
    def listify_accept(cls, value: Any) -> Any:
        return _as_list(value)


class FormatOptions(RuleOptions):
    """format: a pattern, or ``{"with": pattern, "without": pattern}``."""
    with_: re.Pattern | None = Field(default=None, alias="with")
    without: re.Pattern | None = None

    @classmethod
    def shorthand(cls, config: Any) -> Any:
        if isinstance(config, (str, re.Pattern)):
            return {"with": config}
        return super().shorthand(config)


class LengthOptions(RuleOptions):
    """length: ``3`` (exactly), ``[3, 4]`` (range), or the full options."""
    is_: int | None = Field(default=None, alias="is")
    minimum: int | None = None
    maximum: int | None = None
    range: tuple[int, int] | None = None

    @classmethod
    def shorthand(cls, config: Any) -> Any:
        if isinstance(config, int) and not isinstance(config, bool):
            return {"is": config}
        if isinstance(config, (list, tuple)):
            return {"range": config}
        return super().shorthand(config)


class NumericalityOptions(RuleOptions):
    greater_than: Number | None = None
    greater_than_or_equal_to: Number | None = None
    equal_to: Number | None = None
    less_than_or_equal_to: Number | None = None
    less_than: Number | None = None
    other_than: Number | None = None
    only_integer: bool = False
    even: bool = False
    odd: bool = False


def parse_bounds(rule_name: str, config: Any) -> tuple[Number, Number]:
    """Parse a ``[low, high]`` pair for range-style aliases."""
    return _parse_pair(_BOUNDS, rule_name, config)


def parse_length_bounds(rule_name: str, config: Any) -> tuple[int, int]:
    return _parse_pair(_LENGTH_BOUNDS, rule_name, config)


def _parse_pair(adapter: TypeAdapter, rule_name: str, config: Any) -> tuple:
    if not isinstance(config, Sequence) or isinstance(config, str):
        raise InvalidRuleOptionsError(rule_name, config, "expected a [low, high] pair")
    try:
        return adapter.validate_python(tuple(config))
    except PydanticValidationError as e:
        raise InvalidRuleOptionsError(rule_name, config, e.errors()[0]["msg"]) from e

"""Validation Error System

One outcome failure kind (ValidationError) carrying a path-addressable
``detail`` mapping, plus construction-time configuration errors that never
appear inside a detail.

Detail Format:
    rule level:       {"presence": True}
    attribute level:  {"presence": True, "length": True}
    model level:      {"password": {"length": True}, "email": {"format": True}}

Usage:
    try:
        await validate_model(attrs)
    except ValidationError as e:
        e.detail   # {"email": {"format": True}}
        e.paths()  # ["email.format"]
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Validation outcomes
    E5xxx: Rule configuration errors
    E9xxx: Internal/Unknown errors
    """
    # Validation (E2xxx)
    E2000_VALIDATION_FAILED = 2000
    E2001_RULE_FAILED = 2001
    E2002_ATTRIBUTE_INVALID = 2002
    E2003_MODEL_INVALID = 2003

    # Configuration (E5xxx)
    E5100_UNKNOWN_RULE = 5100
    E5101_INVALID_RULE_OPTIONS = 5101

    # Internal (E9xxx)
    E9001_UNEXPECTED_ERROR = 9001

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 5000 <= code < 6000:
            return "configuration"
        return "internal"


class RatifyError(Exception):
    """Base error with a typed code and a human-readable message."""

    default_code = ErrorCode.E9001_UNEXPECTED_ERROR
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None, *, code: ErrorCode | None = None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for API responses."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "category": self.code.category,
                "message": self.message,
            }
        }


class ValidationError(RatifyError):
    """Raised when one or more checks fail.

    Inspect ``detail`` to see which checks failed; ``message`` is advisory.
    """

    default_code = ErrorCode.E2000_VALIDATION_FAILED
    default_message = "Validation error"

    def __init__(
        self,
        message: str | None = None,
        detail: Mapping[str, Any] | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        super().__init__(message, code=code)
        self.detail: dict[str, Any] = dict(detail or {})

    def __str__(self) -> str:
        if not self.detail:
            return self.message
        return f"{self.message} ({len(self.paths())} failed)"

    def __repr__(self) -> str:
        return f"ValidationError({self.message!r}, {self.detail!r})"

    def paths(self) -> list[str]:
        """Flatten the detail into sorted dotted paths, e.g. ``["email.format"]``."""
        return sorted(_flatten(self.detail))

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["error"]["type"] = "validation_error"
        payload["error"]["detail"] = self.detail
        return payload


class UnknownRuleError(RatifyError):
    """Raised while building a validator for an unregistered rule name."""

    default_code = ErrorCode.E5100_UNKNOWN_RULE

    def __init__(self, rule_name: str):
        self.rule_name = rule_name
        super().__init__(
            f"unknown validation rule {rule_name!r} (register it, or pass a callable as its configuration)"
        )


class InvalidRuleOptionsError(RatifyError):
    """Raised while building a validator whose configuration has the wrong shape."""

    default_code = ErrorCode.E5101_INVALID_RULE_OPTIONS

    def __init__(self, rule_name: str, options: Any, reason: str = ""):
        self.rule_name = rule_name
        self.options = options
        message = f"invalid options for rule {rule_name!r}: {options!r}"
        super().__init__(f"{message} ({reason})" if reason else message)


def is_validation_error(exc: BaseException) -> bool:
    """Predicate for filtering validation failures out of other exceptions."""
    return isinstance(exc, ValidationError)


def reject_unless(ok: Any, message: str | None = None, detail: Mapping[str, Any] | None = None) -> None:
    """Raise a ValidationError unless ``ok`` is truthy."""
    if not ok:
        raise ValidationError(message, detail)


def join_keys(detail: Mapping[str, Any]) -> str:
    return ", ".join(sorted(detail))


def _flatten(detail: Mapping[str, Any], prefix: str = "") -> list[str]:
    paths: list[str] = []
    for key, value in detail.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            paths.extend(_flatten(value, path))
        else:
            paths.append(path)
    return paths

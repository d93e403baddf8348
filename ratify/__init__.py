"""Ratify: Declarative, Asynchronous Validation

Rule specifications describe how each attribute of an object must look;
Ratify turns them into reusable async validators that check one rule, one
attribute, or a whole model, and report every failing check at once.

Key Features:
- Rule, attribute and model validators sharing one error shape
- Concurrent checks with settle-all aggregation (never first-failure-wins)
- Instance-scoped rule registries; rules can be composed from other rules
- Built-in ActiveModel-style rules plus Backbone.Validation-style aliases
- Inline checks (sync or async) for one-off rules

Usage:
    from ratify import get_model_validator, ValidationError

    validate = get_model_validator({
        "username": {"presence": True},
        "password": {"presence": True, "length": {"minimum": 5}},
        "password_confirmation": {"confirmation": "password"},
    })

    try:
        await validate(attrs)
    except ValidationError as e:
        print(e.detail)  # {"password": {"length": True}, ...}
"""

from .errors import (
    ErrorCode,
    InvalidRuleOptionsError,
    RatifyError,
    UnknownRuleError,
    ValidationError,
    is_validation_error,
    reject_unless,
)
from .paths import deep_get
from .settle import SettleResult, settle, settle_all
from .registry import (
    Check,
    RuleFactory,
    RuleRegistry,
    default_registry,
    register_rule,
)
from .combinators import (
    AttributeValidator,
    ModelRuleSpecification,
    ModelValidator,
    RuleSpecification,
    RuleValidator,
    get_attribute_validator,
    get_model_validator,
    get_validator,
)
from .config import Settings, get_settings
from .logging import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    # Combinators
    "get_validator",
    "get_attribute_validator",
    "get_model_validator",
    "RuleValidator",
    "AttributeValidator",
    "ModelValidator",
    "RuleSpecification",
    "ModelRuleSpecification",
    # Registry
    "RuleRegistry",
    "RuleFactory",
    "Check",
    "default_registry",
    "register_rule",
    # Aggregation
    "settle",
    "settle_all",
    "SettleResult",
    # Errors
    "ErrorCode",
    "RatifyError",
    "ValidationError",
    "UnknownRuleError",
    "InvalidRuleOptionsError",
    "is_validation_error",
    "reject_unless",
    # Utilities
    "deep_get",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
]

"""Shared fixtures for the ratify test-suite."""
from __future__ import annotations

import pytest

from ratify import RuleRegistry, ValidationError


async def forty_two(attrs, attr_name):
    """Inline check used across tests: the value must be exactly 42."""
    if attrs.get(attr_name) != 42:
        raise ValidationError()


@pytest.fixture()
def registry() -> RuleRegistry:
    """An isolated registry with the built-ins, safe to mutate per test."""
    return RuleRegistry.with_builtins()


@pytest.fixture()
def fortytwo():
    return forty_two


@pytest.fixture(autouse=True)
def _silence_logging(caplog):
    """Most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield

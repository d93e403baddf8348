import io
import json
import logging
import subprocess
import sys
import textwrap

import pytest
from pydantic import ValidationError as SettingsError

from ratify import RuleRegistry, Settings, configure_logging, get_settings
from ratify.logging import LIBRARY_LOGGER, LoggerRegistry, engine_logger, registry_logger


@pytest.fixture()
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


@pytest.fixture()
def library_logger():
    logger = logging.getLogger(LIBRARY_LOGGER)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_settings_defaults(fresh_settings, monkeypatch):
    for name in ("LOG_LEVEL", "LOG_JSON", "LOG_RULE_OVERRIDES", "MAX_CONCURRENT_CHECKS"):
        monkeypatch.delenv(f"RATIFY_{name}", raising=False)
    settings = fresh_settings()
    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_JSON is False
    assert settings.LOG_RULE_OVERRIDES is True
    assert settings.MAX_CONCURRENT_CHECKS is None


def test_settings_read_prefixed_environment(fresh_settings, monkeypatch):
    monkeypatch.setenv("RATIFY_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("RATIFY_LOG_JSON", "true")
    monkeypatch.setenv("RATIFY_MAX_CONCURRENT_CHECKS", "4")
    settings = fresh_settings()
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.LOG_JSON is True
    assert settings.MAX_CONCURRENT_CHECKS == 4


@pytest.mark.parametrize("value", ["0", "-1"])
def test_concurrency_bound_must_be_positive(monkeypatch, value):
    monkeypatch.setenv("RATIFY_MAX_CONCURRENT_CHECKS", value)
    with pytest.raises(SettingsError):
        Settings()


def test_settings_are_cached(fresh_settings):
    assert fresh_settings() is fresh_settings()


def test_domain_loggers_are_cached_per_name():
    assert engine_logger() is LoggerRegistry.get("engine")
    assert registry_logger() is LoggerRegistry.get("registry")
    assert engine_logger() is not registry_logger()


def test_library_is_silent_unless_configured():
    script = textwrap.dedent("""
        import asyncio
        from ratify import get_attribute_validator

        def crash(attrs, attr_name):
            raise RuntimeError("boom")

        validator = get_attribute_validator("a", {"presence": True, "crash": crash})
        assert asyncio.run(validator.errors({})) == {"presence": True, "crash": True}
    """)
    completed = subprocess.run([sys.executable, "-c", script], capture_output=True, text=True, timeout=60)
    assert completed.returncode == 0, completed.stderr
    assert completed.stdout == ""
    assert completed.stderr == ""


def test_json_logging_renders_domain_events(library_logger):
    stream = io.StringIO()
    configure_logging(level="DEBUG", json_logs=True, stream=stream)
    engine_logger().info("validator_built", rule="presence", inline=False)
    [event] = events(stream)
    assert event["event"] == "validator_built"
    assert event["logger"] == "ratify.engine"
    assert event["level"] == "info"
    assert event["library"] == "ratify"
    assert event["rule"] == "presence"


def test_configured_level_filters_events(library_logger):
    stream = io.StringIO()
    configure_logging(level="WARNING", json_logs=True, stream=stream)
    engine_logger().debug("validator_built", rule="presence")
    assert stream.getvalue() == ""


def test_reconfiguring_replaces_the_handler(library_logger):
    first, second = io.StringIO(), io.StringIO()
    configure_logging(level="INFO", json_logs=True, stream=first)
    configure_logging(level="INFO", json_logs=True, stream=second)
    engine_logger().info("model_invalid", attributes=["email"])
    assert first.getvalue() == ""
    assert [e["event"] for e in events(second)] == ["model_invalid"]


def test_rule_override_is_logged_at_debug(library_logger, fresh_settings, monkeypatch):
    monkeypatch.delenv("RATIFY_LOG_RULE_OVERRIDES", raising=False)
    stream = io.StringIO()
    configure_logging(level="DEBUG", json_logs=True, stream=stream)
    registry = RuleRegistry.with_builtins()
    registry.register("presence", lambda registry, config: None)
    assert [(e["event"], e["rule"], e["replaced"]) for e in events(stream)] == [
        ("rule_registered", "presence", True),
    ]

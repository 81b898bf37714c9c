"""Environment-driven settings and the structured log constant catalogue."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from spark_gui.config import settings as settings_mod
from spark_gui.config import paths as paths_mod
from spark_gui.config.paths import get_user_home
from spark_gui.constants import DATE_SECOND_FORMAT, format_date_seconds
from spark_gui.logging_config.helpers import log_constant
from spark_gui.logging_config.log_constants import (
    ALL_LOG_CONSTANTS,
    LOG_STORAGE_ROOT_UNAVAILABLE,
    get_component_snapshot,
    get_constant_by_code,
    list_known_components,
    validate_log_constants,
)
from spark_gui.logging_config.logger import COMPONENT_REGISTRY, ComponentFilter, CorrelationIdAdapter


@pytest.fixture
def clean_settings():
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, clean_settings) -> None:
    monkeypatch.setenv("SPARK_USER_HOME", str(tmp_path))
    monkeypatch.setenv("SPARK_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SPARK_SOUNDS_ENABLED", "off")
    monkeypatch.setenv("SPARK_PRODUCT_NAMESPACE", "SparkDev")

    settings = settings_mod.get_settings()

    assert settings.user_home == tmp_path
    assert settings.home == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.sounds_enabled is False
    assert settings.product_namespace == "SparkDev"
    assert settings_mod.get_settings() is settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch, clean_settings) -> None:
    for name in ("SPARK_USER_HOME", "SPARK_LOG_LEVEL", "LOG_LEVEL", "SPARK_SOUNDS_ENABLED", "SPARK_PRODUCT_NAMESPACE"):
        monkeypatch.delenv(name, raising=False)

    settings = settings_mod.get_settings()

    assert settings.user_home is None
    assert settings.home == Path.home()
    assert settings.product_namespace == "Spark"
    assert settings.sounds_enabled is True


def test_user_home_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SPARK_USER_HOME", str(tmp_path))
    assert get_user_home() == tmp_path


def test_default_preferences_config_is_a_mapping() -> None:
    config = settings_mod.get_default_preferences_config()

    assert config["sound"]["incoming_message"] == "incoming.wav"
    assert all(isinstance(values, dict) for values in config.values())


def test_date_format_matches_legacy_pattern() -> None:
    from datetime import datetime

    assert DATE_SECOND_FORMAT == "%a %m/%d/%Y %I:%M:%S %p"
    assert format_date_seconds(datetime(2006, 1, 2, 0, 0, 1)) == "Mon 01/02/2006 12:00:01 AM"


def test_log_constants_are_valid() -> None:
    assert validate_log_constants() == []
    assert get_constant_by_code(LOG_STORAGE_ROOT_UNAVAILABLE.code) is LOG_STORAGE_ROOT_UNAVAILABLE
    assert get_constant_by_code("LOG999") is None
    assert {"Registry", "Storage", "Clipboard"} <= set(list_known_components())
    assert get_component_snapshot()["Registry"] == {"Locator", "Bootstrap"}
    assert len({const.code for const in ALL_LOG_CONSTANTS}) == len(ALL_LOG_CONSTANTS)


def test_log_constant_attaches_structured_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("spark_gui.tests.logging")
    caplog.set_level(logging.DEBUG, logger="spark_gui")

    log_constant(
        logger,
        LOG_STORAGE_ROOT_UNAVAILABLE,
        message="disk full",
        extra={"path": "/tmp/x", "msg": "reserved keys are dropped"},
    )

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.__dict__["log_code"] == "LOG141"
    assert record.__dict__["component"] == "Storage"
    assert record.__dict__["path"] == "/tmp/x"
    assert "disk full" in record.getMessage()


def test_component_registry_resolves_longest_prefix() -> None:
    assert COMPONENT_REGISTRY.resolve("spark_gui.services.user_storage") == "Storage"
    assert COMPONENT_REGISTRY.resolve("spark_gui.services.chat") == "Service"
    assert COMPONENT_REGISTRY.resolve("third_party") == "Unknown"


def test_correlation_adapter_injects_session(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("spark_gui.tests.adapter")
    caplog.set_level(logging.INFO, logger="spark_gui")

    CorrelationIdAdapter(logger, {"session_id": "alice@example.com"}).info("roster loaded")
    CorrelationIdAdapter(logger, {}).info("anonymous")

    assert caplog.records[-2].__dict__["session_id"] == "alice@example.com"
    assert caplog.records[-1].__dict__["session_id"] == "unknown"


def test_component_filter_labels_records_by_logger_prefix() -> None:
    record = logging.LogRecord("spark_gui.services.clipboard", logging.WARNING, __file__, 1, "x", None, None)

    assert ComponentFilter().filter(record) is True
    assert record.__dict__["component"] == "Clipboard"
    assert record.__dict__["subcomponent"] == "-"


def test_ensure_var_directories_creates_log_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(paths_mod, "VAR_ROOT", tmp_path / "var")
    monkeypatch.setattr(paths_mod, "VAR_LOGS_DIR", tmp_path / "var" / "logs")

    paths_mod.ensure_var_directories()
    paths_mod.ensure_var_directories()

    assert (tmp_path / "var" / "logs").is_dir()

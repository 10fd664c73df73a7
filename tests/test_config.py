"""Tests for settings, exceptions and logging helpers."""

import io
import logging

import pytest

from libretto._logging import LOGGER_NAME, configure_logging, log_warning
from libretto.config import LibrettoSettings, configure, get_settings, reset_settings
from libretto.exceptions import (
    ConfigurationError,
    DocumentError,
    DocumentNotFoundError,
    LibrettoError,
    ValidationFailedError,
)


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


# --- Settings ---

def test_defaults():
    settings = get_settings()
    assert settings.document_version == "1.0"
    assert settings.min_segment_weight == 0.5
    assert settings.recitative_weight_factor == 0.5
    assert settings.anchor_prefix_chars == 15
    assert settings.log_level == "INFO"


def test_settings_are_shared():
    assert get_settings() is get_settings()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LIBRETTO_ANCHOR_PREFIX_CHARS", "20")
    monkeypatch.setenv("LIBRETTO_MIN_SEGMENT_WEIGHT", "1.5")
    reset_settings()
    settings = get_settings()
    assert settings.anchor_prefix_chars == 20
    assert settings.min_segment_weight == 1.5


def test_configure_overrides_environment(monkeypatch):
    monkeypatch.setenv("LIBRETTO_DOCUMENT_VERSION", "3.0")
    settings = configure(document_version="2.0")
    assert settings.document_version == "2.0"
    assert get_settings() is settings


def test_configure_rejects_unknown_setting():
    with pytest.raises(ConfigurationError) as exc_info:
        configure(prefix_length=10)
    assert exc_info.value.setting_name == "prefix_length"


def test_configure_rejects_invalid_value():
    """Out-of-range values raise ConfigurationError naming the setting."""
    with pytest.raises(ConfigurationError) as exc_info:
        configure(recitative_weight_factor=2.0)
    assert exc_info.value.setting_name == "recitative_weight_factor"


def test_settings_instance_is_independent():
    assert LibrettoSettings(anchor_prefix_chars=8).anchor_prefix_chars == 8
    assert get_settings().anchor_prefix_chars == 15


# --- Exceptions ---

def test_exception_hierarchy():
    assert issubclass(DocumentNotFoundError, DocumentError)
    assert issubclass(DocumentError, LibrettoError)
    assert issubclass(ConfigurationError, LibrettoError)
    assert issubclass(ValidationFailedError, LibrettoError)


def test_exception_context_in_message():
    error = DocumentError("Failed to read document", path="figaro.json")
    assert str(error) == "Failed to read document (path=figaro.json)"
    assert str(LibrettoError("plain")) == "plain"


def test_document_not_found_message():
    error = DocumentNotFoundError("missing.json")
    assert error.message == "Document not found: missing.json"
    assert error.path == "missing.json"


# --- Logging ---

def test_configure_logging_accepts_level_names(restore_logger):
    stream = io.StringIO()
    logger = configure_logging("debug", stream=stream)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    log_warning("anchor not found", track="D1T1")
    assert "anchor not found (track=D1T1)" in stream.getvalue()


def test_configure_logging_unknown_level_falls_back(restore_logger):
    logger = configure_logging("LOUD", stream=io.StringIO())
    assert logger.level == logging.INFO

"""Tests for the logging setup.

The module keeps a global ``_logging_configured`` flag, so each test
resets it and strips handlers from the package logger.
"""

import logging

import pytest

import sec_filing_store.core.logging as log_module
from sec_filing_store.core.logging import (
    LOGGER_NAME,
    NOISY_LOGGERS,
    configure_logging,
    get_logger,
    resolve_level,
    set_log_level,
    suppress_third_party_loggers,
)


@pytest.fixture(autouse=True)
def reset_logging_state():
    logger = logging.getLogger(LOGGER_NAME)
    log_module._logging_configured = False
    logger.handlers.clear()
    yield
    log_module._logging_configured = False
    logger.handlers.clear()


class TestResolveLevel:
    def test_env_default_is_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert resolve_level() == logging.INFO

    def test_env_name_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert resolve_level() == logging.DEBUG

    def test_unknown_env_name_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "CHATTY")
        assert resolve_level() == logging.INFO

    @pytest.mark.parametrize(
        "value, expected",
        [("warning", logging.WARNING), ("ERROR", logging.ERROR), (logging.DEBUG, logging.DEBUG), (5, 5)],
    )
    def test_explicit_values(self, value, expected):
        assert resolve_level(value) == expected


class TestConfigureLogging:
    def test_single_plain_handler(self):
        configure_logging(level="DEBUG", use_rich=False)
        logger = logging.getLogger(LOGGER_NAME)
        [handler] = logger.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.formatter._fmt == log_module.PLAIN_FORMAT
        assert logger.level == logging.DEBUG

    def test_second_call_is_noop(self):
        configure_logging(level=logging.INFO, use_rich=False)
        configure_logging(level=logging.DEBUG, use_rich=False)
        logger = logging.getLogger(LOGGER_NAME)
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO

    def test_does_not_propagate(self):
        configure_logging(use_rich=False)
        assert logging.getLogger(LOGGER_NAME).propagate is False


class TestSetLogLevel:
    def test_overrides_level_and_handlers(self):
        configure_logging(level=logging.WARNING, use_rich=False)
        set_log_level("debug")
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)


class TestGetLogger:
    def test_prefixes_foreign_name(self):
        assert get_logger("worker").name == f"{LOGGER_NAME}.worker"

    def test_keeps_package_name(self):
        name = f"{LOGGER_NAME}.storage.azure"
        assert get_logger(name).name == name

    def test_lookalike_prefix_is_namespaced(self):
        assert get_logger(f"{LOGGER_NAME}_extra").name == f"{LOGGER_NAME}.{LOGGER_NAME}_extra"

    def test_configures_on_first_use(self):
        get_logger("anything")
        assert log_module._logging_configured is True


class TestSuppressThirdParty:
    def test_all_noisy_loggers_at_warning(self):
        suppress_third_party_loggers()
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

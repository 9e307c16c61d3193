"""
Logger level resolution tests.
"""
import logging

from backend.utils import logger as logger_module


def test_log_level_setting_overrides_debug_flag(monkeypatch):
    monkeypatch.setattr(logger_module.settings, "LOG_LEVEL", "warning")
    log = logger_module.get_logger("leaf.tests.level")
    assert log.level == logging.WARNING
    assert len(log.handlers) == 1


def test_unknown_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setattr(logger_module.settings, "LOG_LEVEL", "chatty")
    assert logger_module.get_logger("leaf.tests.unknown").level == logging.INFO


def test_debug_flag_used_without_log_level(monkeypatch):
    monkeypatch.setattr(logger_module.settings, "LOG_LEVEL", "")
    monkeypatch.setattr(logger_module.settings, "DEBUG", True)
    assert logger_module.get_logger("leaf.tests.debug").level == logging.DEBUG

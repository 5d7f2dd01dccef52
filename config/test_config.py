import logging

from config.logging_config import configure_logging
from config.settings import Settings
from config.thresholds import DEFAULT_THRESHOLDS, Thresholds


def test_click_retention_is_twice_the_window():
    assert DEFAULT_THRESHOLDS.click_retention == 10.0
    assert Thresholds(failed_click_window=2.0).click_retention == 4.0


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("A11Y_CONFIRMATION_TIMEOUT", "7.5")
    monkeypatch.setenv("A11Y_SPEAK_PROMPTS", "false")

    loaded = Settings()
    assert loaded.confirmation_timeout == 7.5
    assert loaded.speak_prompts is False
    assert loaded.memory_session_key == "adaptive_engine_memory"


def test_configure_logging_attaches_one_handler():
    logger = configure_logging("debug")
    configure_logging("info")

    console = [h for h in logger.handlers if getattr(h, "_a11y_console", False)]
    try:
        assert len(console) == 1
        assert logger.level == logging.INFO
    finally:
        for handler in console:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

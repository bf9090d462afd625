"""Unit tests for /src/core/settings.py and /src/core/log_config.py"""

import logging

import pytest

from src.core.log_config import CONSOLE_HANDLER_NAME, setup_logging
from src.core.settings import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.auto_move_delay_seconds == 2.0
    assert settings.max_players_per_room == 4
    assert settings.database_url.startswith("sqlite")


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CROSSCHESS_AUTO_MOVE_DELAY_SECONDS", "0.5")
    monkeypatch.setenv("CROSSCHESS_LOG_LEVEL", "DEBUG")
    settings = Settings(_env_file=None)
    assert settings.auto_move_delay_seconds == 0.5
    assert settings.log_level == "DEBUG"


def test_setup_logging_sets_application_level() -> None:
    root_handlers = list(logging.getLogger().handlers)
    try:
        setup_logging("debug")
        assert logging.getLogger("src").level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        logging.getLogger().handlers = root_handlers


def test_setup_logging_twice_adds_one_handler() -> None:
    root_logger = logging.getLogger()
    root_handlers = list(root_logger.handlers)
    try:
        setup_logging()
        setup_logging("debug")
        console_handlers = [
            handler
            for handler in root_logger.handlers
            if handler.get_name() == CONSOLE_HANDLER_NAME
        ]
        assert len(console_handlers) == 1
        assert len(root_logger.handlers) == len(root_handlers) + 1
        assert logging.getLogger("src").level == logging.DEBUG
    finally:
        root_logger.handlers = root_handlers

"""Logging setup for the application."""

import logging
import sys

CONSOLE_HANDLER_NAME = "crosschess-console"


def setup_logging(level: str = "INFO") -> None:
    """
    Install a stdout handler on the root logger and set the level of the application loggers.

    Safe to call more than once: the console handler is only added the first time.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    logging.getLogger("src").setLevel(level.upper())
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    if any(handler.get_name() == CONSOLE_HANDLER_NAME for handler in root_logger.handlers):
        return

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

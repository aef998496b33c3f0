"""Logging configuration for Spendlog.

The CLI calls setup_logging() once to attach a dated log file and the
console. Library code only ever asks for get_logger(); until setup runs the
records go to a NullHandler, so embedding the ledger stays silent.
"""

import logging
from datetime import date
from typing import Optional
from config import Config

_ROOT_NAME = "spendlog"

logging.getLogger(_ROOT_NAME).addHandler(logging.NullHandler())


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.
        console: Whether to also echo records to the terminal.

    Returns:
        Configured root application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(_ROOT_NAME)
    logger.setLevel(config.log_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # One file per day: spendlog-{date}.log
    log_file_path = config.log_dir / f"{_ROOT_NAME}-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(detailed_formatter)
    logger.addHandler(file_handler)

    if console:
        # Bare messages: the CLI uses the logger as its output channel
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or one of its children.

    Args:
        name: Optional child name, e.g. "ledger" for "spendlog.ledger".

    Returns:
        Logger instance.
    """
    if name:
        return logging.getLogger(f"{_ROOT_NAME}.{name}")
    return logging.getLogger(_ROOT_NAME)

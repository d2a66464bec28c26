"""
Logging setup for the flashstudy scheduler.

Everything logs under the ``flashstudy_app`` logger: scheduling decisions at
INFO, per-review FSRS detail at DEBUG, engine failures at ERROR.
"""

import os
import logging
import logging.handlers
from typing import Optional

from .config import Config

LOGGER_NAME = 'flashstudy_app'
LOG_FILENAME = 'flashstudy.log'

PLAIN_FORMAT = '%(asctime)s [%(levelname)s] %(module)s: %(message)s'
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"module": "%(module)s", "message": "%(message)s"}'
)


def _formatter(json_format: bool) -> logging.Formatter:
    return logging.Formatter(
        JSON_FORMAT if json_format else PLAIN_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _rotating_file_handler(log_dir: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILENAME),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )


def setup_logging(
    log_level: Optional[str] = None,
    log_dir: Optional[str] = None,
    json_format: Optional[bool] = None,
    to_file: bool = True
) -> logging.Logger:
    """
    Attach console (and optionally rotating file) handlers to the package logger.

    Unset arguments fall back to Config.LOG_LEVEL, Config.LOG_DIR and
    Config.LOG_JSON. Calling it again replaces the previous handlers.
    """
    log_level = log_level or Config.LOG_LEVEL
    log_dir = log_dir or Config.LOG_DIR
    if json_format is None:
        json_format = Config.LOG_JSON
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handlers = [logging.StreamHandler()]
    if to_file:
        handlers.append(_rotating_file_handler(log_dir))

    formatter = _formatter(json_format)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized: level={logging.getLevelName(level)}, file={to_file}")
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)

"""Core infrastructure: configuration and logging."""

from .config import Config
from .logging_config import get_logger, setup_logging

__all__ = [
    "Config",
    "get_logger",
    "setup_logging",
]

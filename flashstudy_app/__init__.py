"""Spaced-repetition scheduling engine for the flashstudy app."""

from __future__ import annotations

from .core import Config, setup_logging
from .modules.scheduling import (
    CardSchedulingState,
    CardStateEnum,
    Rating,
    SchedulerInterface,
    StudyDifficulty,
)

__version__ = "1.0.0"

__all__ = [
    "CardSchedulingState",
    "CardStateEnum",
    "Config",
    "Rating",
    "SchedulerInterface",
    "StudyDifficulty",
    "setup_logging",
]

"""Spaced-repetition scheduling: SM-2 and FSRS behind one interface."""

from .exceptions import (
    ConfigurationError,
    EngineCalculationError,
    InvalidRatingError,
    SchedulingError,
    UnknownAlgorithmError,
)
from .interface import SchedulerInterface
from .schemas import (
    CardSchedulingState,
    CardStateEnum,
    DeckStats,
    FsrsResult,
    Rating,
    Sm2Result,
    StudyDifficulty,
)
from .services.settings_service import SchedulerSettingsService
from .signals import card_reviewed, settings_updated

__all__ = [
    "CardSchedulingState",
    "CardStateEnum",
    "ConfigurationError",
    "DeckStats",
    "EngineCalculationError",
    "FsrsResult",
    "InvalidRatingError",
    "Rating",
    "SchedulerInterface",
    "SchedulerSettingsService",
    "SchedulingError",
    "Sm2Result",
    "StudyDifficulty",
    "UnknownAlgorithmError",
    "card_reviewed",
    "settings_updated",
]

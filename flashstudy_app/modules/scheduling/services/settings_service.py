# File: flashstudy_app/modules/scheduling/services/settings_service.py
from __future__ import annotations
import logging
from typing import Any, Dict, List
from ..config import SchedulerDefaultConfig
from ..engine.strategies import ALGORITHMS
from ..exceptions import ConfigurationError
from ..signals import settings_updated

logger = logging.getLogger(__name__)


def _validate_algorithm(value):
    value = str(value).strip().lower()
    if value not in ALGORITHMS:
        raise ConfigurationError(f"SCHEDULER_ALGORITHM must be one of {list(ALGORITHMS)}, got {value!r}")
    return value


def _validate_retention(value):
    value = float(value)
    if not 0.0 < value < 1.0:
        raise ConfigurationError(f"FSRS_DESIRED_RETENTION must be between 0 and 1, got {value}")
    return value


def _validate_positive_int(key):
    def _check(value):
        value = int(value)
        if value <= 0:
            raise ConfigurationError(f"{key} must be positive, got {value}")
        return value
    return _check


def _validate_weights(value):
    weights = [float(w) for w in value]
    if not weights:
        raise ConfigurationError("FSRS_GLOBAL_WEIGHTS must not be empty")
    return weights


class SchedulerSettingsService:
    """Service for managing scheduler configuration."""

    DEFAULTS: Dict[str, Any] = {
        'SCHEDULER_ALGORITHM': SchedulerDefaultConfig.SCHEDULER_ALGORITHM,
        'FSRS_DESIRED_RETENTION': SchedulerDefaultConfig.FSRS_DESIRED_RETENTION,
        'FSRS_MAX_INTERVAL': SchedulerDefaultConfig.FSRS_MAX_INTERVAL,
        'FSRS_MIN_INTERVAL_MINUTES': SchedulerDefaultConfig.FSRS_MIN_INTERVAL_MINUTES,
        'FSRS_GLOBAL_WEIGHTS': SchedulerDefaultConfig.FSRS_GLOBAL_WEIGHTS,
    }

    VALIDATORS = {
        'SCHEDULER_ALGORITHM': _validate_algorithm,
        'FSRS_DESIRED_RETENTION': _validate_retention,
        'FSRS_MAX_INTERVAL': _validate_positive_int('FSRS_MAX_INTERVAL'),
        'FSRS_MIN_INTERVAL_MINUTES': _validate_positive_int('FSRS_MIN_INTERVAL_MINUTES'),
        'FSRS_GLOBAL_WEIGHTS': _validate_weights,
    }

    _cache: Dict[str, Any] = {}

    @classmethod
    def invalidate_cache(cls) -> None:
        cls._cache.clear()
        settings_updated.send(cls, keys=[])

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        if key in cls._cache:
            return cls._cache[key]
        if key in cls.DEFAULTS:
            return cls.DEFAULTS[key]
        return default

    @classmethod
    def set(cls, key: str, value: Any) -> Any:
        return cls.update({key: value})[key]

    @classmethod
    def update(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and apply several settings at once; nothing changes if one is invalid."""
        validated = {}
        for key, value in data.items():
            validator = cls.VALIDATORS.get(key)
            if validator is None:
                raise ConfigurationError(f"Unknown scheduler setting {key!r}")
            try:
                validated[key] = validator(value)
            except (TypeError, ValueError) as e:
                if isinstance(e, ConfigurationError):
                    raise
                raise ConfigurationError(f"Invalid value for {key}: {value!r}") from e

        cls._cache.update(validated)
        logger.info(f"Scheduler settings updated: {sorted(validated)}")
        settings_updated.send(cls, keys=sorted(validated))
        return validated

    @classmethod
    def get_fsrs_params(cls) -> Dict[str, Any]:
        return {
            'desired_retention': cls.get('FSRS_DESIRED_RETENTION'),
            'max_interval': cls.get('FSRS_MAX_INTERVAL'),
            'min_interval_minutes': cls.get('FSRS_MIN_INTERVAL_MINUTES'),
        }

    @classmethod
    def get_weights(cls) -> List[float]:
        return list(cls.get('FSRS_GLOBAL_WEIGHTS'))

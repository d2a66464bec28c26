# modules/scheduling/config.py

from fsrs_rs_python import DEFAULT_PARAMETERS

from flashstudy_app.core.config import Config


class Sm2Constants:
    """Constants for the SM-2 algorithm."""
    DEFAULT_EASE_FACTOR = 2.5
    MIN_EASE_FACTOR = 1.3
    PASSING_QUALITY = 3
    FIRST_INTERVAL_DAYS = 1
    SECOND_INTERVAL_DAYS = 6
    FAILED_INTERVAL_DAYS = 1


class SchedulerDefaultConfig:
    SCHEDULER_ALGORITHM = Config.SCHEDULER_ALGORITHM
    FSRS_DESIRED_RETENTION = Config.FSRS_DESIRED_RETENTION
    FSRS_MAX_INTERVAL = Config.FSRS_MAX_INTERVAL
    FSRS_MIN_INTERVAL_MINUTES = Config.FSRS_MIN_INTERVAL_MINUTES
    FSRS_GLOBAL_WEIGHTS = Config.FSRS_WEIGHTS or list(DEFAULT_PARAMETERS)

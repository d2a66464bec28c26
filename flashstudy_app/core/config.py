# File: flashstudy_app/core/config.py
# Core configuration layer: environment variables (optionally from .env).

import os
from dotenv import load_dotenv

load_dotenv()

# Project root (this file lives in flashstudy_app/core/)
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_weights(name):
    raw = os.environ.get(name)
    if not raw:
        return None
    return [float(part) for part in raw.split(',') if part.strip()]


class Config:
    """Configuration for the flashstudy scheduler."""

    # Default strategy used by schedule_card when no algorithm is given ('sm2' or 'fsrs')
    SCHEDULER_ALGORITHM = os.environ.get('SCHEDULER_ALGORITHM', 'sm2').strip().lower()

    FSRS_DESIRED_RETENTION = float(os.environ.get('FSRS_DESIRED_RETENTION', '0.9'))
    FSRS_MAX_INTERVAL = int(os.environ.get('FSRS_MAX_INTERVAL', '36500'))
    FSRS_MIN_INTERVAL_MINUTES = int(os.environ.get('FSRS_MIN_INTERVAL_MINUTES', '20'))
    # None means the library's DEFAULT_PARAMETERS
    FSRS_WEIGHTS = _env_weights('FSRS_WEIGHTS')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON = _env_bool('LOG_JSON')

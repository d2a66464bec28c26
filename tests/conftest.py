import datetime
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flashstudy_app.modules.scheduling import CardSchedulingState, CardStateEnum
from flashstudy_app.modules.scheduling.services.settings_service import SchedulerSettingsService


@pytest.fixture(autouse=True)
def reset_settings():
    SchedulerSettingsService.invalidate_cache()
    yield
    SchedulerSettingsService.invalidate_cache()


@pytest.fixture
def now():
    return datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def new_card(now):
    return CardSchedulingState(due=now)


@pytest.fixture
def review_card(now):
    """A graduated card last seen ten days ago."""
    return CardSchedulingState(
        interval=10,
        repetitions=3,
        stability=10.0,
        difficulty=5.0,
        state=CardStateEnum.REVIEW,
        scheduled_days=10.0,
        last_review=now - datetime.timedelta(days=10),
        due=now,
        review_count=4,
    )

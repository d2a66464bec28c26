"""
Tests for the SM-2 Engine - simple spaced repetition family

Tests cover:
- SM-2 interval / ease / repetition transitions
- Ease factor floor
- Due-date derivation
- Retention/forgetting curve calculations
"""

import datetime

import pytest

from flashstudy_app.modules.scheduling.config import Sm2Constants
from flashstudy_app.modules.scheduling.engine.sm2 import Sm2Engine
from flashstudy_app.modules.scheduling.exceptions import InvalidRatingError
from flashstudy_app.modules.scheduling.schemas import (
    CardStateEnum,
    StudyDifficulty,
)

PASSING = [StudyDifficulty.HARD, StudyDifficulty.MEDIUM, StudyDifficulty.EASY]


class TestSm2Constants:

    def test_default_ease_factor(self):
        assert Sm2Constants.DEFAULT_EASE_FACTOR == 2.5

    def test_min_ease_factor(self):
        assert Sm2Constants.MIN_EASE_FACTOR == 1.3

    def test_quality_map(self):
        assert [d.quality for d in StudyDifficulty] == [0, 3, 4, 5]


class TestSm2EngineCalculateNextReview:

    @pytest.mark.parametrize("interval,ease,reps", [(0, 2.5, 0), (1, 2.5, 1), (120, 1.3, 9), (6, 3.1, 2)])
    def test_again_always_resets(self, interval, ease, reps):
        result = Sm2Engine.calculate_next_review(interval, ease, reps, StudyDifficulty.AGAIN)

        assert result.repetitions == 0
        assert result.interval == 1
        assert result.ease_factor == ease

    def test_easy_after_first_repetition(self):
        """{interval 1, ease 2.5, reps 1} rated easy gives the 6-day step."""
        result = Sm2Engine.calculate_next_review(1, 2.5, 1, StudyDifficulty.EASY)

        assert result.interval == 6
        assert result.repetitions == 2
        # 5 - q == 0 leaves only the +0.1 term
        assert result.ease_factor == pytest.approx(2.6)

    def test_again_keeps_ease(self):
        result = Sm2Engine.calculate_next_review(1, 2.5, 1, StudyDifficulty.AGAIN)

        assert (result.interval, result.repetitions) == (1, 0)
        assert result.ease_factor == 2.5

    @pytest.mark.parametrize("ease", [1.1, 0.5, 0.0])
    def test_again_lifts_ease_below_floor(self, ease):
        result = Sm2Engine.calculate_next_review(3, ease, 2, StudyDifficulty.AGAIN)

        assert (result.interval, result.repetitions) == (1, 0)
        assert result.ease_factor == Sm2Constants.MIN_EASE_FACTOR

    @pytest.mark.parametrize("difficulty", PASSING)
    def test_first_pass_is_one_day(self, difficulty):
        result = Sm2Engine.calculate_next_review(0, 2.5, 0, difficulty)
        assert result.interval == 1
        assert result.repetitions == 1

    @pytest.mark.parametrize("difficulty", PASSING)
    def test_second_pass_is_six_days(self, difficulty):
        result = Sm2Engine.calculate_next_review(1, 2.5, 1, difficulty)
        assert result.interval == 6
        assert result.repetitions == 2

    def test_medium_keeps_ease(self):
        result = Sm2Engine.calculate_next_review(6, 2.5, 2, StudyDifficulty.MEDIUM)
        assert result.ease_factor == pytest.approx(2.5)
        assert result.interval == 15

    def test_hard_lowers_ease(self):
        result = Sm2Engine.calculate_next_review(6, 2.5, 2, StudyDifficulty.HARD)
        assert result.ease_factor == pytest.approx(2.36)
        assert result.interval == 14

    @pytest.mark.parametrize("ease", [1.3, 1.35, 1.4])
    def test_ease_floor(self, ease):
        result = Sm2Engine.calculate_next_review(10, ease, 4, StudyDifficulty.HARD)
        assert result.ease_factor >= Sm2Constants.MIN_EASE_FACTOR
        assert result.ease_factor == pytest.approx(max(1.3, ease - 0.14))

    def test_interval_rounds_half_up(self):
        result = Sm2Engine.calculate_next_review(5, 2.5, 2, StudyDifficulty.MEDIUM)
        assert result.interval == 13

    def test_repeated_easy_grows_strictly(self):
        interval, ease, reps = 0, 2.5, 0
        intervals = []
        for _ in range(8):
            result = Sm2Engine.calculate_next_review(interval, ease, reps, StudyDifficulty.EASY)
            interval, ease, reps = result.interval, result.ease_factor, result.repetitions
            intervals.append(interval)

        assert intervals[:3] == [1, 6, 17]
        tail = intervals[2:]
        assert all(b > a for a, b in zip(tail, tail[1:]))

    def test_string_difficulty_accepted(self):
        result = Sm2Engine.calculate_next_review(0, 2.5, 0, " Easy ")
        assert result.repetitions == 1

    @pytest.mark.parametrize("bad", ["good", "", 3, None, "very_easy"])
    def test_unknown_difficulty_rejected(self, bad):
        with pytest.raises(InvalidRatingError):
            Sm2Engine.calculate_next_review(0, 2.5, 0, bad)


class TestSm2ReviewCard:

    def test_new_card_medium(self, new_card, now):
        card = Sm2Engine.review_card(new_card, StudyDifficulty.MEDIUM, now)

        assert card.interval == 1
        assert card.repetitions == 1
        assert card.due == now + datetime.timedelta(days=1)
        assert card.last_review == now
        assert card.review_count == 1
        assert card.state == CardStateEnum.REVIEW

    def test_failure_moves_to_learning(self, review_card, now):
        card = Sm2Engine.review_card(review_card, StudyDifficulty.AGAIN, now)

        assert card.state == CardStateEnum.LEARNING
        assert card.repetitions == 0
        assert card.review_count == review_card.review_count + 1
        assert card.due == now + datetime.timedelta(days=1)

    def test_input_is_not_modified(self, new_card, now):
        Sm2Engine.review_card(new_card, StudyDifficulty.EASY, now)
        assert new_card.review_count == 0
        assert new_card.last_review is None


class TestNextReviewDate:

    def test_adds_interval_days(self, now):
        assert Sm2Engine.get_next_review_date(6, now) == now + datetime.timedelta(days=6)

    def test_naive_now_is_utc(self):
        naive = datetime.datetime(2024, 1, 1, 8, 30)
        due = Sm2Engine.get_next_review_date(1, naive)
        assert due == datetime.datetime(2024, 1, 2, 8, 30, tzinfo=datetime.timezone.utc)


class TestRetention:

    def test_no_review_has_zero_retention(self, now):
        assert Sm2Engine.calculate_retention(None, 5, now) == 0.0

    def test_just_reviewed(self, now):
        assert Sm2Engine.calculate_retention(now, 5, now) == pytest.approx(1.0)

    def test_ninety_percent_at_due(self, now):
        last = now - datetime.timedelta(days=6)
        assert Sm2Engine.calculate_retention(last, 6, now) == pytest.approx(0.9)


class TestUtility:

    def test_quality_descriptions(self):
        assert Sm2Engine.quality_to_description(0) == "Complete Fail"
        assert Sm2Engine.quality_to_description(5) == "Perfect / Easy"
        assert Sm2Engine.quality_to_description(9) == "Unknown"

    def test_is_correct(self):
        assert Sm2Engine.is_correct(3)
        assert not Sm2Engine.is_correct(2)

"""
SM-2 Engine - Pure Spaced Repetition Logic (simple family)

Pure functions for SM-2 calculations.
No storage access - only calculations based on inputs.

This engine provides:
- SM-2 interval / ease factor / repetition transitions
- Due-date derivation
- Interval previews for every difficulty
- Retention/forgetting curve calculations
"""

import datetime
import math
from dataclasses import replace
from typing import Dict, Optional

from ..config import Sm2Constants
from ..schemas import (
    CardSchedulingState,
    CardStateEnum,
    Sm2Result,
    StudyDifficulty,
    as_utc,
    utcnow,
)


def _round_half_up(value: float) -> int:
    # Built-in round() rounds halves to even; intervals round 2.5 -> 3
    return int(math.floor(value + 0.5))


class Sm2Engine:
    """
    Pure calculation engine for the SM-2 family.
    All methods are static and use only provided inputs.
    """

    # === SM-2 Algorithm ===

    @staticmethod
    def calculate_next_review(
        interval: int,
        ease_factor: float,
        repetitions: int,
        difficulty: StudyDifficulty
    ) -> Sm2Result:
        """
        Calculate the next SM-2 scheduling values.

        Args:
            interval: Current interval in days
            ease_factor: Current ease factor
            repetitions: Consecutive successful reviews so far
            difficulty: Learner's self-assessment

        Returns:
            Sm2Result with the new interval, ease factor and repetitions
        """
        difficulty = StudyDifficulty.parse(difficulty)
        quality = difficulty.quality

        if not Sm2Engine.is_correct(quality):
            # Failed - restart the learning curve; ease keeps only its floor
            return Sm2Result(
                interval=Sm2Constants.FAILED_INTERVAL_DAYS,
                ease_factor=max(Sm2Constants.MIN_EASE_FACTOR, ease_factor),
                repetitions=0,
            )

        # EF' = EF + (0.1 - (5-q) * (0.08 + (5-q)*0.02))
        miss = 5 - quality
        new_ef = max(
            Sm2Constants.MIN_EASE_FACTOR,
            ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
        )

        if repetitions == 0:
            new_interval = Sm2Constants.FIRST_INTERVAL_DAYS
        elif repetitions == 1:
            new_interval = Sm2Constants.SECOND_INTERVAL_DAYS
        else:
            new_interval = _round_half_up(interval * new_ef)

        return Sm2Result(
            interval=new_interval,
            ease_factor=new_ef,
            repetitions=repetitions + 1,
        )

    @staticmethod
    def get_next_review_date(interval_days: int, now: Optional[datetime.datetime] = None) -> datetime.datetime:
        """Return the instant `interval_days` days after now."""
        now = as_utc(now) if now is not None else utcnow()
        return now + datetime.timedelta(days=interval_days)

    @staticmethod
    def review_card(
        card: CardSchedulingState,
        difficulty: StudyDifficulty,
        now: Optional[datetime.datetime] = None
    ) -> CardSchedulingState:
        """Apply one SM-2 review to a full scheduling record."""
        now = as_utc(now) if now is not None else utcnow()
        result = Sm2Engine.calculate_next_review(
            card.interval, card.ease_factor, card.repetitions, difficulty
        )
        state = CardStateEnum.REVIEW if result.repetitions > 0 else CardStateEnum.LEARNING
        return replace(
            card,
            interval=result.interval,
            ease_factor=result.ease_factor,
            repetitions=result.repetitions,
            state=state,
            scheduled_days=float(result.interval),
            due=Sm2Engine.get_next_review_date(result.interval, now),
            last_review=now,
            review_count=card.review_count + 1,
        )

    @staticmethod
    def predict_next_intervals(card: CardSchedulingState) -> Dict[StudyDifficulty, str]:
        """Interval each difficulty would produce, e.g. {'easy': '6d'}."""
        previews = {}
        for difficulty in StudyDifficulty:
            result = Sm2Engine.calculate_next_review(
                card.interval, card.ease_factor, card.repetitions, difficulty
            )
            previews[difficulty] = f"{result.interval}d"
        return previews

    # === Retention & Forgetting Curve ===

    @staticmethod
    def calculate_retention(
        last_reviewed: Optional[datetime.datetime],
        interval_days: int,
        now: Optional[datetime.datetime] = None
    ) -> float:
        """
        Calculate retention probability using Forgetting Curve: R = e^(-t/S)

        S is derived from the interval assuming 90% retention at the scheduled
        due time: S = -interval / ln(0.9).
        """
        if not last_reviewed or interval_days <= 0:
            return 0.0

        now = as_utc(now) if now is not None else utcnow()
        last_reviewed = as_utc(last_reviewed)

        elapsed_days = max(0.0, (now - last_reviewed).total_seconds() / 86400.0)
        stability = -interval_days / math.log(0.9)
        retention = math.exp(-elapsed_days / stability)

        return min(1.0, max(0.0, retention))

    # === Utility Methods ===

    @staticmethod
    def quality_to_description(quality: int) -> str:
        """Convert quality value to human-readable description."""
        descriptions = {
            0: "Complete Fail",
            1: "Again / Failed",
            2: "Hard (vague)",
            3: "Hard",
            4: "Good",
            5: "Perfect / Easy"
        }
        return descriptions.get(quality, "Unknown")

    @staticmethod
    def is_correct(quality: int) -> bool:
        """Determine if quality represents a correct answer."""
        return quality >= Sm2Constants.PASSING_QUALITY

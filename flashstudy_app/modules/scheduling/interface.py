# File: flashstudy_app/modules/scheduling/interface.py
from typing import Any, Callable, Dict, Iterable, List, Optional
import datetime
from .engine.sm2 import Sm2Engine
from .schemas import (
    CardSchedulingState,
    DeckStats,
    FsrsResult,
    Rating,
    Sm2Result,
    StudyDifficulty,
)
from .services.scheduler_service import SchedulerService


class SchedulerInterface:
    """Public API for the scheduling module."""

    @staticmethod
    def review_simple(card: CardSchedulingState, difficulty: StudyDifficulty) -> Sm2Result:
        """SM-2 step: new interval, ease factor and repetitions for one rating."""
        return Sm2Engine.calculate_next_review(
            card.interval, card.ease_factor, card.repetitions, StudyDifficulty.parse(difficulty)
        )

    @staticmethod
    def review_advanced(
        card: CardSchedulingState,
        rating: Rating,
        now: Optional[datetime.datetime] = None
    ) -> FsrsResult:
        """FSRS step: difficulty, stability, state, due, last_review and review_count."""
        return SchedulerService.get_engine().review(card, Rating.parse(rating), now)

    @staticmethod
    def schedule_card(
        card: CardSchedulingState,
        rating: Any,
        algorithm: Optional[str] = None,
        now: Optional[datetime.datetime] = None
    ) -> CardSchedulingState:
        """Full state transition with the configured (or given) algorithm."""
        return SchedulerService.process_review(card, rating, algorithm=algorithm, now=now)

    @staticmethod
    def get_next_review_date(interval_days: int, now: Optional[datetime.datetime] = None) -> datetime.datetime:
        return Sm2Engine.get_next_review_date(interval_days, now)

    @staticmethod
    def is_due(card: Any, now: Optional[datetime.datetime] = None) -> bool:
        return SchedulerService.is_due(card, now)

    @staticmethod
    def get_due_cards(
        cards: Iterable[Any],
        now: Optional[datetime.datetime] = None,
        key: Optional[Callable[[Any], Any]] = None
    ) -> List[Any]:
        return SchedulerService.get_due_cards(cards, now=now, key=key)

    @staticmethod
    def new_card(now: Optional[datetime.datetime] = None) -> CardSchedulingState:
        return SchedulerService.new_card(now)

    @staticmethod
    def get_deck_stats(
        cards: Iterable[Any],
        now: Optional[datetime.datetime] = None,
        key: Optional[Callable[[Any], Any]] = None
    ) -> DeckStats:
        """Counts of total, due, reviewed and never-reviewed cards."""
        return SchedulerService.get_deck_stats(cards, now=now, key=key)

    @staticmethod
    def predict_next_intervals(
        card: CardSchedulingState,
        algorithm: Optional[str] = None,
        now: Optional[datetime.datetime] = None
    ) -> Dict[str, str]:
        """Preview the interval each rating would give, keyed by lower-case rating name."""
        return SchedulerService.predict_next_intervals(card, algorithm=algorithm, now=now)

    @staticmethod
    def get_retrievability(
        card: CardSchedulingState,
        algorithm: Optional[str] = None,
        now: Optional[datetime.datetime] = None
    ) -> float:
        """Calculate current retrievability (memory power)."""
        return SchedulerService.get_retrievability(card, algorithm=algorithm, now=now)

    @staticmethod
    def quality_to_description(quality: int) -> str:
        return Sm2Engine.quality_to_description(quality)

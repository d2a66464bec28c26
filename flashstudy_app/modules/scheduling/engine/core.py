from __future__ import annotations
import datetime
import logging
import math
from dataclasses import replace
from typing import Optional, Tuple, Dict, List
from fsrs_rs_python import FSRS, DEFAULT_PARAMETERS, MemoryState
from ..config import SchedulerDefaultConfig
from ..exceptions import EngineCalculationError
from ..schemas import (
    Rating,
    CardStateEnum,
    CardSchedulingState,
    FsrsResult,
    ReviewLog,
    as_utc,
    utcnow,
)

logger = logging.getLogger(__name__)

GRADUATION_THRESHOLD_DAYS = 1.0


class FSRSEngine:
    """
    Standard FSRS Engine using fsrs-rs-python.
    Pure Logic Layer: no storage, no randomness.
    """

    def __init__(
        self,
        custom_weights: Optional[List[float]] = None,
        desired_retention: float = SchedulerDefaultConfig.FSRS_DESIRED_RETENTION,
        max_interval_days: float = SchedulerDefaultConfig.FSRS_MAX_INTERVAL,
        min_interval_minutes: float = SchedulerDefaultConfig.FSRS_MIN_INTERVAL_MINUTES,
    ):
        params = custom_weights if custom_weights else list(DEFAULT_PARAMETERS)
        self.fsrs = FSRS(parameters=params)
        self.desired_retention = desired_retention
        self.max_interval_days = float(max_interval_days)
        self.min_interval_days = float(min_interval_minutes) / 1440.0

    def _to_memory_state(self, card: CardSchedulingState) -> Optional[MemoryState]:
        # No FSRS memory yet (new, or only ever scheduled by SM-2)
        if card.state == CardStateEnum.NEW or card.stability <= 0:
            return None
        return MemoryState(
            stability=max(0.1, float(card.stability)),
            difficulty=max(1.0, min(10.0, float(card.difficulty)))
        )

    @staticmethod
    def elapsed_days(card: CardSchedulingState, now: datetime.datetime) -> int:
        """Whole days since the last review, 0 if never reviewed."""
        if not card.last_review:
            return 0
        seconds = (as_utc(now) - as_utc(card.last_review)).total_seconds()
        return max(0, math.floor(seconds / 86400.0))

    @staticmethod
    def next_card_state(current: CardStateEnum, rating: Rating, interval_days: float) -> CardStateEnum:
        if rating == Rating.Again:
            if current in (CardStateEnum.REVIEW, CardStateEnum.RELEARNING):
                return CardStateEnum.RELEARNING
            return CardStateEnum.LEARNING

        if current == CardStateEnum.REVIEW:
            return CardStateEnum.REVIEW
        if interval_days >= GRADUATION_THRESHOLD_DAYS:
            return CardStateEnum.REVIEW
        if current == CardStateEnum.RELEARNING:
            return CardStateEnum.RELEARNING
        return CardStateEnum.LEARNING

    def _next_states(self, card: CardSchedulingState, elapsed: int):
        try:
            return self.fsrs.next_states(
                self._to_memory_state(card),
                self.desired_retention,
                elapsed
            )
        except Exception as e:
            logger.error(f"[FSRS ENGINE] next_states error: {e}")
            raise EngineCalculationError(f"FSRS next_states failed: {e}") from e

    @staticmethod
    def _select(next_states, rating: Rating):
        rating_map = {
            Rating.Again: next_states.again,
            Rating.Hard: next_states.hard,
            Rating.Good: next_states.good,
            Rating.Easy: next_states.easy
        }
        return rating_map[rating]

    def _clamp_interval(self, raw_interval: float) -> float:
        return max(self.min_interval_days, min(self.max_interval_days, raw_interval))

    def get_realtime_retention(self, card: CardSchedulingState, now: Optional[datetime.datetime] = None) -> float:
        """Calculate current retention probability."""
        # A NEW card always has 0 retrievability until first review
        if card.state == CardStateEnum.NEW:
            return 0.0

        if card.stability <= 0:
            return 1.0 if card.review_count > 0 else 0.0

        if not card.last_review:
            return 1.0

        now = as_utc(now) if now is not None else utcnow()
        elapsed = (now - as_utc(card.last_review)).total_seconds() / 86400.0
        if elapsed <= 0:
            return 1.0

        try:
            return 0.9 ** (elapsed / card.stability)
        except (ZeroDivisionError, OverflowError):
            return 0.0

    def review_card(
        self,
        card: CardSchedulingState,
        rating: Rating,
        now: Optional[datetime.datetime] = None
    ) -> Tuple[CardSchedulingState, ReviewLog]:
        """
        Process a review and return the new scheduling record and a log entry.
        """
        rating = Rating.parse(rating)
        now = as_utc(now) if now is not None else utcnow()

        elapsed = self.elapsed_days(card, now)
        selected = self._select(self._next_states(card, elapsed), rating)

        raw_interval = float(selected.interval)
        interval = self._clamp_interval(raw_interval)
        new_state = self.next_card_state(card.state, rating, interval)

        lapses = card.lapses
        if not rating.is_passing and card.state == CardStateEnum.REVIEW:
            lapses += 1

        new_card = replace(
            card,
            stability=float(selected.memory.stability),
            difficulty=float(selected.memory.difficulty),
            state=new_state,
            lapses=lapses,
            scheduled_days=interval,
            last_review=now,
            due=now + datetime.timedelta(days=interval),
            review_count=card.review_count + 1,
        )

        log = ReviewLog(
            rating=int(rating),
            elapsed_days=elapsed,
            scheduled_days=interval,
            start_state=card.state,
            end_state=new_state,
            original_interval=raw_interval,
        )
        logger.debug(
            f"FSRS review: rating={rating.name} elapsed={elapsed}d "
            f"{card.state.name}->{new_state.name} interval={interval:.3f}d"
        )
        return new_card, log

    def review(self, card: CardSchedulingState, rating: Rating, now: Optional[datetime.datetime] = None) -> FsrsResult:
        """Review returning only the fields the FSRS family owns."""
        new_card, _ = self.review_card(card, rating, now)
        return FsrsResult(
            difficulty=new_card.difficulty,
            stability=new_card.stability,
            state=new_card.state,
            due=new_card.due,
            last_review=new_card.last_review,
            review_count=new_card.review_count,
        )

    def predict_next_intervals(self, card: CardSchedulingState, now: Optional[datetime.datetime] = None) -> Dict[Rating, str]:
        """
        Predict next intervals for all 4 ratings without updating state.
        Returns a dict mapping Rating -> Display String (e.g. '1d').
        """
        now = as_utc(now) if now is not None else utcnow()
        next_states = self._next_states(card, self.elapsed_days(card, now))

        def _fmt_ivl(days):
            days = float(days)
            if days < 1.0:
                mins = round(days * 1440)
                return f"{mins}m"
            if days >= 30.0:
                return f"{round(days/30.0, 1)}mo"
            return f"{round(days, 1)}d"

        return {
            rating: _fmt_ivl(self._clamp_interval(float(self._select(next_states, rating).interval)))
            for rating in Rating
        }

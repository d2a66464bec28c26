# File: flashstudy_app/modules/scheduling/engine/strategies.py
from __future__ import annotations
import datetime
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..exceptions import UnknownAlgorithmError
from ..schemas import CardSchedulingState, Rating, StudyDifficulty
from .core import FSRSEngine
from .sm2 import Sm2Engine


class SchedulingStrategy(ABC):
    """One algorithm family behind the schedule(card, rating) boundary."""

    name: str = ''

    @abstractmethod
    def parse_rating(self, rating: Any):
        """Validate a rating, translating the other family's scale when given."""

    @abstractmethod
    def schedule(self, card: CardSchedulingState, rating: Any, now: Optional[datetime.datetime] = None) -> CardSchedulingState:
        ...

    @abstractmethod
    def preview(self, card: CardSchedulingState, now: Optional[datetime.datetime] = None) -> Dict[str, str]:
        ...

    @abstractmethod
    def retrievability(self, card: CardSchedulingState, now: Optional[datetime.datetime] = None) -> float:
        ...


class Sm2Strategy(SchedulingStrategy):
    name = 'sm2'

    def parse_rating(self, rating: Any) -> StudyDifficulty:
        if isinstance(rating, Rating):
            return rating.to_difficulty()
        if isinstance(rating, str) and rating.strip().lower() == 'good':
            return StudyDifficulty.MEDIUM
        return StudyDifficulty.parse(rating)

    def schedule(self, card, rating, now=None):
        return Sm2Engine.review_card(card, self.parse_rating(rating), now)

    def preview(self, card, now=None):
        return {d.value: ivl for d, ivl in Sm2Engine.predict_next_intervals(card).items()}

    def retrievability(self, card, now=None):
        return Sm2Engine.calculate_retention(card.last_review, card.interval, now)


class FsrsStrategy(SchedulingStrategy):
    name = 'fsrs'

    def __init__(self, engine: FSRSEngine):
        self.engine = engine

    def parse_rating(self, rating: Any) -> Rating:
        if isinstance(rating, StudyDifficulty):
            return rating.to_rating()
        if isinstance(rating, str) and rating.strip().lower() == 'medium':
            return Rating.Good
        return Rating.parse(rating)

    def schedule(self, card, rating, now=None):
        new_card, _ = self.engine.review_card(card, self.parse_rating(rating), now)
        return new_card

    def preview(self, card, now=None):
        return {r.name.lower(): ivl for r, ivl in self.engine.predict_next_intervals(card, now).items()}

    def retrievability(self, card, now=None):
        return self.engine.get_realtime_retention(card, now)


ALGORITHMS = (Sm2Strategy.name, FsrsStrategy.name)


def build_strategy(name: str, fsrs_engine: Optional[FSRSEngine] = None) -> SchedulingStrategy:
    key = (name or '').strip().lower()
    if key == Sm2Strategy.name:
        return Sm2Strategy()
    if key == FsrsStrategy.name:
        return FsrsStrategy(fsrs_engine or FSRSEngine())
    raise UnknownAlgorithmError(f"Unknown scheduling algorithm {name!r}; expected one of {list(ALGORITHMS)}")

# File: flashstudy_app/modules/scheduling/schemas.py
from __future__ import annotations
import datetime
from dataclasses import dataclass, asdict
from enum import Enum, IntEnum
from typing import Optional, Dict, Any

from .config import Sm2Constants
from .exceptions import InvalidRatingError


def as_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class StudyDifficulty(str, Enum):
    """Self-assessed difficulty for the SM-2 family."""
    AGAIN = 'again'
    HARD = 'hard'
    MEDIUM = 'medium'
    EASY = 'easy'

    @property
    def quality(self) -> int:
        return _SM2_QUALITY[self]

    def to_rating(self) -> Rating:
        return _DIFFICULTY_TO_RATING[self]

    @classmethod
    def parse(cls, value: Any) -> StudyDifficulty:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidRatingError(
            f"Difficulty must be one of {[d.value for d in cls]}, got {value!r}"
        )


# Standard FSRS Rating (1-4)
class Rating(IntEnum):
    Again = 1
    Hard = 2
    Good = 3
    Easy = 4

    def to_difficulty(self) -> StudyDifficulty:
        return _RATING_TO_DIFFICULTY[self]

    @property
    def is_passing(self) -> bool:
        return self >= Rating.Hard

    @classmethod
    def parse(cls, value: Any) -> Rating:
        if isinstance(value, cls):
            return value
        # StudyDifficulty is a str; its names must not pass as FSRS ratings
        if isinstance(value, StudyDifficulty):
            raise InvalidRatingError(
                f"Rating must be one of {[r.name for r in cls]} (1-4), got {value!r}"
            )
        # bool is an int subclass; True must not mean Again
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls.parse(int(text))
            for member in cls:
                if member.name.lower() == text.lower():
                    return member
        raise InvalidRatingError(
            f"Rating must be one of {[r.name for r in cls]} (1-4), got {value!r}"
        )


_SM2_QUALITY = {
    StudyDifficulty.AGAIN: 0,   # Complete blackout
    StudyDifficulty.HARD: 3,    # Correct with serious difficulty
    StudyDifficulty.MEDIUM: 4,  # Correct with hesitation
    StudyDifficulty.EASY: 5,    # Perfect response
}

_DIFFICULTY_TO_RATING = {
    StudyDifficulty.AGAIN: Rating.Again,
    StudyDifficulty.HARD: Rating.Hard,
    StudyDifficulty.MEDIUM: Rating.Good,
    StudyDifficulty.EASY: Rating.Easy,
}

_RATING_TO_DIFFICULTY = {v: k for k, v in _DIFFICULTY_TO_RATING.items()}


# FSRS Math State Constants
class CardStateEnum(IntEnum):
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


@dataclass(frozen=True)
class CardSchedulingState:
    """Scheduling snapshot of one card. Reviews return a new instance."""
    # SM-2 family
    interval: int = 0               # days
    ease_factor: float = Sm2Constants.DEFAULT_EASE_FACTOR
    repetitions: int = 0            # consecutive successful reviews
    # FSRS family
    difficulty: float = 0.0         # FSRS D (1-10), 0 while new
    stability: float = 0.0          # FSRS S (days)
    state: CardStateEnum = CardStateEnum.NEW
    lapses: int = 0
    scheduled_days: float = 0.0
    # Shared
    due: Optional[datetime.datetime] = None
    last_review: Optional[datetime.datetime] = None
    review_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['state'] = int(self.state)
        data['due'] = self.due.isoformat() if self.due else None
        data['last_review'] = self.last_review.isoformat() if self.last_review else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CardSchedulingState:
        def _ts(value):
            if value is None or value == '':
                return None
            if isinstance(value, datetime.datetime):
                return as_utc(value)
            return as_utc(datetime.datetime.fromisoformat(str(value)))

        return cls(
            interval=int(data.get('interval') or 0),
            ease_factor=float(data.get('ease_factor') or Sm2Constants.DEFAULT_EASE_FACTOR),
            repetitions=int(data.get('repetitions') or 0),
            difficulty=float(data.get('difficulty') or 0.0),
            stability=float(data.get('stability') or 0.0),
            state=CardStateEnum(int(data.get('state') or CardStateEnum.NEW)),
            lapses=int(data.get('lapses') or 0),
            scheduled_days=float(data.get('scheduled_days') or 0.0),
            due=_ts(data.get('due')),
            last_review=_ts(data.get('last_review')),
            review_count=int(data.get('review_count') or 0),
        )


@dataclass(frozen=True)
class Sm2Result:
    interval: int
    ease_factor: float
    repetitions: int


@dataclass(frozen=True)
class FsrsResult:
    """Fields produced by one FSRS review."""
    difficulty: float
    stability: float
    state: CardStateEnum
    due: datetime.datetime
    last_review: datetime.datetime
    review_count: int


@dataclass(frozen=True)
class DeckStats:
    total: int = 0
    due: int = 0
    reviewed: int = 0
    new: int = 0


@dataclass
class ReviewLog:
    """Diagnostic record of one FSRS transition."""
    rating: int
    elapsed_days: int
    scheduled_days: float
    start_state: CardStateEnum
    end_state: CardStateEnum
    original_interval: float

from typing import Any, Callable, Dict, Iterable, List, Optional
import datetime
import logging
from collections.abc import Mapping
from flashstudy_app.modules.scheduling.engine.core import FSRSEngine
from flashstudy_app.modules.scheduling.engine.strategies import SchedulingStrategy, build_strategy
from flashstudy_app.modules.scheduling.schemas import (
    CardSchedulingState,
    DeckStats,
    as_utc,
    utcnow,
)
from flashstudy_app.modules.scheduling.services.settings_service import SchedulerSettingsService
from flashstudy_app.modules.scheduling.signals import card_reviewed, settings_updated

logger = logging.getLogger(__name__)

_engine_cache: Dict[str, FSRSEngine] = {}


@settings_updated.connect
def _drop_cached_engine(sender, **kwargs):
    _engine_cache.clear()


def _state_of(item: Any, key: Optional[Callable[[Any], Any]]) -> Any:
    return key(item) if key is not None else item


def _due_of(state: Any) -> Optional[datetime.datetime]:
    if isinstance(state, Mapping):
        due = state.get('due')
    else:
        due = getattr(state, 'due', None)
    if isinstance(due, str):
        due = datetime.datetime.fromisoformat(due)
    return as_utc(due)


def _last_review_of(state: Any) -> Optional[datetime.datetime]:
    if isinstance(state, Mapping):
        return state.get('last_review')
    return getattr(state, 'last_review', None)


class SchedulerService:
    """
    Orchestrator for card scheduling.
    Handles configuration, engine calls, due queries and signal emission.
    Persisting the returned state is the caller's job.
    """

    @staticmethod
    def get_engine() -> FSRSEngine:
        engine = _engine_cache.get('fsrs')
        if engine is None:
            params = SchedulerSettingsService.get_fsrs_params()
            engine = FSRSEngine(
                custom_weights=SchedulerSettingsService.get_weights(),
                desired_retention=float(params['desired_retention']),
                max_interval_days=params['max_interval'],
                min_interval_minutes=params['min_interval_minutes'],
            )
            _engine_cache['fsrs'] = engine
        return engine

    @staticmethod
    def get_strategy(algorithm: Optional[str] = None) -> SchedulingStrategy:
        name = algorithm or SchedulerSettingsService.get('SCHEDULER_ALGORITHM')
        if str(name).strip().lower() == 'fsrs':
            return build_strategy(name, SchedulerService.get_engine())
        return build_strategy(name)

    @staticmethod
    def new_card(now: Optional[datetime.datetime] = None) -> CardSchedulingState:
        """Scheduling state for a freshly authored card: due immediately."""
        now = as_utc(now) if now is not None else utcnow()
        return CardSchedulingState(due=now)

    @staticmethod
    def process_review(
        card: CardSchedulingState,
        rating: Any,
        algorithm: Optional[str] = None,
        now: Optional[datetime.datetime] = None
    ) -> CardSchedulingState:
        """
        Main entry point for scheduling a card after one rating.
        """
        strategy = SchedulerService.get_strategy(algorithm)
        parsed = strategy.parse_rating(rating)
        now = as_utc(now) if now is not None else utcnow()

        new_state = strategy.schedule(card, parsed, now)

        logger.info(
            f"Scheduled card with {strategy.name}: rating={getattr(parsed, 'name', parsed)} "
            f"review_count={new_state.review_count} due={new_state.due.isoformat()}"
        )
        card_reviewed.send(
            SchedulerService,
            algorithm=strategy.name,
            rating=parsed,
            previous=card,
            new_state=new_state,
        )
        return new_state

    @staticmethod
    def is_due(card: Any, now: Optional[datetime.datetime] = None) -> bool:
        """True iff now >= due. A card that was never scheduled is due."""
        due = _due_of(card)
        if due is None:
            return True
        now = as_utc(now) if now is not None else utcnow()
        return now >= due

    @staticmethod
    def get_due_cards(
        cards: Iterable[Any],
        now: Optional[datetime.datetime] = None,
        key: Optional[Callable[[Any], Any]] = None
    ) -> List[Any]:
        """Cards that are due, in input order. `key` extracts the scheduling state."""
        now = as_utc(now) if now is not None else utcnow()
        return [card for card in cards if SchedulerService.is_due(_state_of(card, key), now)]

    @staticmethod
    def get_deck_stats(
        cards: Iterable[Any],
        now: Optional[datetime.datetime] = None,
        key: Optional[Callable[[Any], Any]] = None
    ) -> DeckStats:
        now = as_utc(now) if now is not None else utcnow()
        total = due = reviewed = 0
        for card in cards:
            state = _state_of(card, key)
            total += 1
            if SchedulerService.is_due(state, now):
                due += 1
            if _last_review_of(state):
                reviewed += 1
        return DeckStats(total=total, due=due, reviewed=reviewed, new=total - reviewed)

    @staticmethod
    def predict_next_intervals(
        card: CardSchedulingState,
        algorithm: Optional[str] = None,
        now: Optional[datetime.datetime] = None
    ) -> Dict[str, str]:
        return SchedulerService.get_strategy(algorithm).preview(card, now)

    @staticmethod
    def get_retrievability(
        card: CardSchedulingState,
        algorithm: Optional[str] = None,
        now: Optional[datetime.datetime] = None
    ) -> float:
        return SchedulerService.get_strategy(algorithm).retrievability(card, now)

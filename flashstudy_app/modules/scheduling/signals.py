from blinker import Namespace

# Define a signal namespace for scheduling
_signals = Namespace()

# Signal emitted after a card has been scheduled
# Arguments:
# - sender: SchedulerService
# - algorithm: str ('sm2' or 'fsrs')
# - rating: StudyDifficulty or Rating, as understood by the algorithm
# - previous: CardSchedulingState before the review
# - new_state: CardSchedulingState to be persisted by the caller
card_reviewed = _signals.signal('card-reviewed')

# Signal emitted after scheduler settings are changed or reset
# Arguments:
# - sender: SchedulerSettingsService
# - keys: list of changed keys (empty on reset)
settings_updated = _signals.signal('settings-updated')

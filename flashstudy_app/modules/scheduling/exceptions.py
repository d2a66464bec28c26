class SchedulingError(Exception):
    """Base exception for the scheduling module."""
    pass

class InvalidRatingError(SchedulingError, ValueError):
    """Raised when a rating is outside the algorithm family's closed set."""
    pass

class UnknownAlgorithmError(SchedulingError, ValueError):
    """Raised when no scheduling strategy is registered under the given name."""
    pass

class EngineCalculationError(SchedulingError):
    """Raised when the FSRS engine fails to calculate next states."""
    pass

class ConfigurationError(SchedulingError, ValueError):
    """Raised when a scheduler setting has an invalid value."""
    pass

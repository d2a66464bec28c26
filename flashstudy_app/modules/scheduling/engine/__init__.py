from .core import FSRSEngine
from .sm2 import Sm2Engine
from .strategies import (
    ALGORITHMS,
    FsrsStrategy,
    SchedulingStrategy,
    Sm2Strategy,
    build_strategy,
)

__all__ = [
    "ALGORITHMS",
    "FSRSEngine",
    "FsrsStrategy",
    "SchedulingStrategy",
    "Sm2Engine",
    "Sm2Strategy",
    "build_strategy",
]

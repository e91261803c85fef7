"""
Learning step scheduling.

Computes the short delays a card gets while it works through its
learning or relearning steps.

Components:
- LearningSteps: Again/Hard/Good delays and remaining-counter updates
- StepProgress: Split form of the packed "remaining" counter
- StepScheduler: Applies answers and tracks graduation
"""

from .progress import StepProgress
from .states import Rating, StepConfig, StepOutcome, StepScheduler, StepState
from .steps import DEFAULT_SECS_IF_MISSING, LearningSteps, to_secs

__all__ = [
    # Delays
    "LearningSteps",
    "DEFAULT_SECS_IF_MISSING",
    "to_secs",
    # Progress counter
    "StepProgress",
    # State transitions
    "Rating",
    "StepConfig",
    "StepOutcome",
    "StepScheduler",
    "StepState",
]

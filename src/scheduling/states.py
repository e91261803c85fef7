"""
Learning State Transitions.

Walks a card through its learning or relearning steps:

    Step 0 -> Step 1 -> ... -> Step N-1 -> Graduated

Answer effects:
- Again: back to Step 0
- Hard:  stay on the current step
- Good:  next step, or graduate from the last one

Only the short step delays are handled here. Once a card graduates the
review scheduler takes over until the card lapses again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from loguru import logger

from .progress import StepProgress
from .steps import LearningSteps

# =============================================================================
# Types
# =============================================================================


class Rating(IntEnum):
    """Answer buttons available while in learning."""

    AGAIN = 1
    HARD = 2
    GOOD = 3

    @classmethod
    def parse(cls, value: str | int) -> Rating:
        """
        Parse a rating from a button name or number.

        Args:
            value: "again"/"hard"/"good" (any case) or 1-3

        Returns:
            Matching Rating
        """
        if isinstance(value, str):
            text = value.strip()
            if text.isdecimal():
                value = int(text)
            else:
                try:
                    return cls[text.upper()]
                except KeyError:
                    raise ValueError(f"Unknown rating: {value!r}") from None
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown rating: {value!r}") from None


@dataclass(frozen=True)
class StepState:
    """Where a card sits in its learning steps."""

    remaining: StepProgress
    relearning: bool = False
    graduated: bool = False


@dataclass(frozen=True)
class StepOutcome:
    """Result of answering a card in learning."""

    rating: Rating
    state: StepState
    delay_secs: int | None  # None once the card graduates

    @property
    def graduated(self) -> bool:
        return self.state.graduated


@dataclass
class StepConfig:
    """Step lengths in minutes."""

    learning_steps: list[float] = field(default_factory=lambda: [1.0, 10.0])
    relearning_steps: list[float] = field(default_factory=lambda: [10.0])


# =============================================================================
# Step Scheduler
# =============================================================================


class StepScheduler:
    """
    Applies answers to cards in learning or relearning.

    Delays come from LearningSteps; this class only decides which one
    applies and what the next state is. The "seen today" count is carried
    through every transition untouched.
    """

    def __init__(self, config: StepConfig | None = None):
        """
        Initialize step scheduler.

        Args:
            config: Custom step lengths (uses defaults if None)
        """
        self.config = config or StepConfig()
        self.learning = LearningSteps(self.config.learning_steps)
        self.relearning = LearningSteps(self.config.relearning_steps)

    def steps_for(self, state: StepState) -> LearningSteps:
        return self.relearning if state.relearning else self.learning

    def start_learning(self, today_count: int = 0) -> StepOutcome:
        """Put a new card on its first learning step."""
        progress = StepProgress(self.learning.remaining_for_failed(), today_count)
        state = StepState(remaining=progress)
        return StepOutcome(
            rating=Rating.AGAIN,
            state=state,
            delay_secs=self.learning.again_delay_secs_learn(),
        )

    def start_relearning(self, today_count: int = 0) -> StepOutcome:
        """
        Put a lapsed card on its first relearning step.

        With no relearning steps configured the card goes straight back
        to review, signalled by a graduated state and no delay.
        """
        progress = StepProgress(self.relearning.remaining_for_failed(), today_count)
        delay = self.relearning.again_delay_secs_relearn()
        state = StepState(remaining=progress, relearning=True, graduated=delay is None)
        if delay is None:
            logger.debug("No relearning steps configured, skipping to review")
        return StepOutcome(rating=Rating.AGAIN, state=state, delay_secs=delay)

    def answer(self, state: StepState, rating: Rating | str | int) -> StepOutcome:
        """
        Apply an answer to a card in learning.

        Args:
            state: Current step state
            rating: Again, Hard or Good

        Returns:
            StepOutcome with the next state and its delay
        """
        if state.graduated:
            raise ValueError("Card has already graduated from its learning steps")

        rating = Rating.parse(rating)
        steps = self.steps_for(state)
        progress = state.remaining

        if rating == Rating.AGAIN:
            delay = (
                steps.again_delay_secs_relearn()
                if state.relearning
                else steps.again_delay_secs_learn()
            )
            progress = progress.with_steps_remaining(steps.remaining_for_failed())
        elif rating == Rating.HARD:
            delay = steps.hard_delay_secs(progress)
        else:
            delay = steps.good_delay_secs(progress)
            if delay is not None:
                progress = progress.with_steps_remaining(steps.remaining_for_good(progress))

        graduated = delay is None
        next_state = StepState(
            remaining=progress,
            relearning=state.relearning,
            graduated=graduated,
        )

        if graduated:
            logger.info(
                f"Card graduated from {'relearning' if state.relearning else 'learning'} "
                f"on {rating.name.lower()}"
            )
        else:
            logger.debug(
                f"{rating.name.lower()}: step {steps.get_index(progress)} "
                f"(remaining={progress.steps_remaining}), delay={delay}s"
            )

        return StepOutcome(rating=rating, state=next_state, delay_secs=delay)

    def preview(self, state: StepState) -> dict[Rating, int | None]:
        """
        Get the delay each button would give, without moving the card.

        Returns:
            Mapping of Rating to delay in seconds (None = graduate)
        """
        steps = self.steps_for(state)
        again = (
            steps.again_delay_secs_relearn()
            if state.relearning
            else steps.again_delay_secs_learn()
        )
        return {
            Rating.AGAIN: again,
            Rating.HARD: steps.hard_delay_secs(state.remaining),
            Rating.GOOD: steps.good_delay_secs(state.remaining),
        }

"""
Learning Step Delays.

Computes the short delays used while a card walks through its learning
(or relearning) steps:
- Again / Hard / Good delays in whole seconds
- Step index derived from the card's "remaining" counter
- The remaining counter to store after a pass or a failure

Step lengths are configured in minutes. The remaining counter may carry a
"seen today" count in its upper digits; only ``remaining % 1000`` is read
here. A ``None`` delay from ``good_delay_secs`` means the card graduates.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence

from .progress import StepProgress

# =============================================================================
# Constants
# =============================================================================

DEFAULT_SECS_IF_MISSING = 60  # Again delay for a learning card with no steps
U32_MAX = 2**32 - 1
F32_MAX = 3.4028234663852886e38

Remaining = int | StepProgress


# =============================================================================
# Saturating Arithmetic
# =============================================================================


def _saturate(value: int) -> int:
    return max(0, min(U32_MAX, value))


def saturating_add(a: int, b: int) -> int:
    """Add two delays, clamping to the u32 range."""
    return _saturate(a + b)


def saturating_sub(a: int, b: int) -> int:
    """Subtract, flooring at zero."""
    return _saturate(a - b)


def saturating_mul(a: int, b: int) -> int:
    """Multiply two delays, clamping to the u32 range."""
    return _saturate(a * b)


def _f32(value: float) -> float:
    """Round a float to single precision (overflow becomes +/-inf)."""
    if math.isnan(value) or math.isinf(value):
        return value
    if abs(value) > F32_MAX:
        return math.copysign(math.inf, value)
    return struct.unpack("f", struct.pack("f", value))[0]


def to_secs(minutes: float) -> int:
    """
    Convert a step length in minutes to whole seconds.

    The product is computed in single precision and truncated toward zero.
    NaN and negative results give 0; anything past the u32 range gives U32_MAX.

    Args:
        minutes: Step length in minutes

    Returns:
        Seconds in [0, U32_MAX]
    """
    secs = _f32(_f32(minutes) * 60.0)
    if math.isnan(secs) or secs <= 0:
        return 0
    if secs >= U32_MAX:
        return U32_MAX
    return int(secs)


# =============================================================================
# Learning Steps
# =============================================================================


class LearningSteps:
    """
    Read-only view over a configured sequence of learning steps.

    The sequence is borrowed from the caller's configuration and never
    copied or mutated. An empty sequence is valid; each query falls back
    to its own default in that case.
    """

    __slots__ = ("_steps",)

    def __init__(self, steps: Sequence[float]):
        """
        Args:
            steps: Step lengths in minutes, in order
        """
        self._steps = steps

    @property
    def steps(self) -> Sequence[float]:
        return self._steps

    def __len__(self) -> int:
        return len(self._steps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LearningSteps):
            return NotImplemented
        return list(self._steps) == list(other._steps)

    def __hash__(self) -> int:
        return hash(tuple(self._steps))

    def __repr__(self) -> str:
        return f"LearningSteps({list(self._steps)!r})"

    # -------------------------------------------------------------------------
    # Index derivation
    # -------------------------------------------------------------------------

    @staticmethod
    def _steps_remaining(remaining: Remaining) -> int:
        if isinstance(remaining, StepProgress):
            return max(0, remaining.steps_remaining)
        return max(0, remaining) % 1000

    def get_index(self, remaining: Remaining) -> int:
        """
        Get the index of the step the card is sitting at.

        The "seen today" digits are stripped and the result is clamped to
        the last step, so out-of-range counters never fail.

        Args:
            remaining: Packed counter or StepProgress

        Returns:
            Index in [0, len(steps) - 1] (0 for an empty sequence)
        """
        total = len(self._steps)
        left = self._steps_remaining(remaining)
        return min(saturating_sub(total, left), saturating_sub(total, 1))

    def _secs_at_index(self, index: int) -> int | None:
        if 0 <= index < len(self._steps):
            return to_secs(self._steps[index])
        return None

    # -------------------------------------------------------------------------
    # Delays
    # -------------------------------------------------------------------------

    def again_delay_secs_learn(self) -> int:
        """Cards in learning must always have at least one learning step."""
        secs = self._secs_at_index(0)
        return DEFAULT_SECS_IF_MISSING if secs is None else secs

    def again_delay_secs_relearn(self) -> int | None:
        """First step delay, or None to skip relearning and go to review."""
        return self._secs_at_index(0)

    def hard_delay_secs(self, remaining: Remaining) -> int | None:
        """
        Get the delay for Hard at the current step.

        On the first step the delay is the midpoint of the first and second
        steps, so Hard never shows the same interval as Again. With a single
        step the missing second step counts as twice the first.

        Args:
            remaining: Packed counter or StepProgress

        Returns:
            Delay in seconds, or None if there are no steps
        """
        idx = self.get_index(remaining)
        current = self._secs_at_index(idx)
        if current is None:
            # current index invalid, fall back to the first step
            current = self._secs_at_index(0)
        if current is None:
            return None

        if idx == 0:
            following = self._secs_at_index(idx + 1)
            if following is None:
                following = saturating_mul(current, 2)
            return saturating_add(current, following) // 2
        return current

    def good_delay_secs(self, remaining: Remaining) -> int | None:
        """Delay of the next step, or None when the card should graduate."""
        idx = self.get_index(remaining)
        return self._secs_at_index(idx + 1)

    def current_delay_secs(self, remaining: Remaining) -> int:
        idx = self.get_index(remaining)
        secs = self._secs_at_index(idx)
        return 0 if secs is None else secs

    # -------------------------------------------------------------------------
    # Remaining counter updates
    # -------------------------------------------------------------------------

    def remaining_for_good(self, remaining: Remaining) -> int:
        """Steps left after a Good answer (the caller adds its today digits)."""
        idx = self.get_index(remaining)
        return saturating_sub(len(self._steps), idx + 1)

    def remaining_for_failed(self) -> int:
        """Steps left after a failing answer: the full sequence again."""
        return len(self._steps)

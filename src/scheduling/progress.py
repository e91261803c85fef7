"""
Step progress counter.

Cards store a single "remaining" integer: the low three decimal digits are
the learning steps still to do, the upper digits count cards already seen
today. StepProgress keeps the two apart and packs them back together for
storage that expects the legacy integer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

PACK_BASE = 1000
MAX_STEPS_REMAINING = PACK_BASE - 1


@dataclass(frozen=True)
class StepProgress:
    """Learning progress for one card."""

    steps_remaining: int
    today_count: int = 0  # Owned by the caller, never interpreted here

    @classmethod
    def from_packed(cls, value: int) -> StepProgress:
        """
        Split a legacy packed counter.

        Args:
            value: today_count * 1000 + steps_remaining (negative reads as 0)

        Returns:
            StepProgress with both fields separated
        """
        value = max(0, value)
        return cls(steps_remaining=value % PACK_BASE, today_count=value // PACK_BASE)

    @property
    def packed(self) -> int:
        """Recombine into the legacy integer form."""
        steps = max(0, min(MAX_STEPS_REMAINING, self.steps_remaining))
        return max(0, self.today_count) * PACK_BASE + steps

    def with_steps_remaining(self, steps_remaining: int) -> StepProgress:
        return replace(self, steps_remaining=steps_remaining)

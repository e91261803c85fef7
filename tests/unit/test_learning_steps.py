"""
Unit tests for LearningSteps delay calculation.

Tests:
- Again / Hard / Good delays per step
- Index derivation from the remaining counter
- Remaining counter updates after Good and Again
- Empty step lists and out-of-range counters
- Saturating second conversion

Run: pytest tests/unit/test_learning_steps.py -v
"""

import math

import pytest

from src.scheduling.progress import StepProgress
from src.scheduling.steps import (
    DEFAULT_SECS_IF_MISSING,
    U32_MAX,
    LearningSteps,
    saturating_add,
    saturating_mul,
    saturating_sub,
    to_secs,
)


class TestDelaySecs:
    """Again/Hard/Good delays for known step lists."""

    @pytest.mark.parametrize(
        "steps,remaining,again,hard,good",
        [
            ([10.0], 1, 600, 900, None),
            ([1.0, 10.0], 2, 60, 330, 600),
            ([1.0, 10.0], 1, 60, 600, None),
            ([1.0, 10.0, 100.0], 3, 60, 330, 600),
            ([1.0, 10.0, 100.0], 2, 60, 600, 6000),
            ([1.0, 10.0, 100.0], 1, 60, 6000, None),
        ],
    )
    def test_delay_secs(self, steps, remaining, again, hard, good):
        learning = LearningSteps(steps)

        assert learning.again_delay_secs_learn() == again
        assert learning.hard_delay_secs(remaining) == hard
        assert learning.good_delay_secs(remaining) == good

    def test_hard_on_first_step_is_midpoint(self, three_steps):
        """Hard on the first step averages the first two steps."""
        learning = LearningSteps(three_steps)
        assert learning.hard_delay_secs(3) == (60 + 600) // 2

    def test_hard_with_single_step_doubles_missing_next(self, one_step):
        """A lone step acts as if the next step were twice as long."""
        learning = LearningSteps(one_step)
        assert learning.hard_delay_secs(1) == (600 + 1200) // 2

    def test_hard_later_step_is_unmodified(self, three_steps):
        learning = LearningSteps(three_steps)
        assert learning.hard_delay_secs(2) == learning.current_delay_secs(2)

    def test_hard_midpoint_rounds_down(self):
        """Odd sums are floored."""
        learning = LearningSteps([1.0, 0.5])  # 60s and 30s
        assert learning.hard_delay_secs(2) == 45

        learning = LearningSteps([0.5 / 60, 1 / 60])  # 0s and 1s
        assert learning.hard_delay_secs(2) == 0

    def test_hard_differs_from_again(self, one_step, two_steps, three_steps):
        for steps in (one_step, two_steps, three_steps):
            learning = LearningSteps(steps)
            first = len(steps)
            assert learning.hard_delay_secs(first) != learning.again_delay_secs_learn()

    def test_good_on_last_step_graduates(self, three_steps):
        learning = LearningSteps(three_steps)
        assert learning.good_delay_secs(1) is None

    def test_good_returns_next_step(self, three_steps):
        learning = LearningSteps(three_steps)
        for remaining in (3, 2):
            idx = learning.get_index(remaining)
            assert learning.good_delay_secs(remaining) == to_secs(three_steps[idx + 1])

    def test_current_delay(self, three_steps):
        learning = LearningSteps(three_steps)
        assert learning.current_delay_secs(3) == 60
        assert learning.current_delay_secs(2) == 600
        assert learning.current_delay_secs(1) == 6000

    def test_again_relearn(self, two_steps):
        assert LearningSteps(two_steps).again_delay_secs_relearn() == 60


class TestEmptySteps:
    """No steps configured is valid and never raises."""

    @pytest.fixture
    def empty(self):
        return LearningSteps([])

    def test_again_learn_uses_default(self, empty):
        assert empty.again_delay_secs_learn() == DEFAULT_SECS_IF_MISSING == 60

    def test_again_relearn_skips(self, empty):
        assert empty.again_delay_secs_relearn() is None

    @pytest.mark.parametrize("remaining", [0, 1, 2, 1000, 999_999])
    def test_queries(self, empty, remaining):
        assert empty.get_index(remaining) == 0
        assert empty.hard_delay_secs(remaining) is None
        assert empty.good_delay_secs(remaining) is None
        assert empty.current_delay_secs(remaining) == 0
        assert empty.remaining_for_good(remaining) == 0

    def test_remaining_for_failed(self, empty):
        assert empty.remaining_for_failed() == 0


class TestIndex:
    """Index derivation from the remaining counter."""

    def test_index_counts_forward(self, three_steps):
        learning = LearningSteps(three_steps)
        assert learning.get_index(3) == 0
        assert learning.get_index(2) == 1
        assert learning.get_index(1) == 2

    def test_index_always_in_bounds(self, three_steps):
        learning = LearningSteps(three_steps)
        for remaining in range(0, 5000, 7):
            assert 0 <= learning.get_index(remaining) <= len(three_steps) - 1

    def test_zero_remaining_clamps_to_last_step(self, three_steps):
        assert LearningSteps(three_steps).get_index(0) == 2

    def test_too_many_remaining_clamps_to_first_step(self, three_steps):
        assert LearningSteps(three_steps).get_index(50) == 0

    def test_negative_remaining_reads_as_zero(self, two_steps):
        learning = LearningSteps(two_steps)
        assert learning.get_index(-5) == learning.get_index(0) == 1
        assert learning.good_delay_secs(-5) is None

    @pytest.mark.parametrize("remaining", [1, 2, 3])
    def test_today_digits_are_ignored(self, three_steps, remaining):
        """Counters that differ by a multiple of 1000 give identical results."""
        learning = LearningSteps(three_steps)
        for today in (1, 7, 123):
            packed = today * 1000 + remaining
            assert learning.get_index(packed) == learning.get_index(remaining)
            assert learning.hard_delay_secs(packed) == learning.hard_delay_secs(remaining)
            assert learning.good_delay_secs(packed) == learning.good_delay_secs(remaining)
            assert learning.remaining_for_good(packed) == learning.remaining_for_good(remaining)

    def test_accepts_step_progress(self, three_steps):
        learning = LearningSteps(three_steps)
        progress = StepProgress(steps_remaining=2, today_count=7)
        assert learning.get_index(progress) == learning.get_index(7002) == 1
        assert learning.good_delay_secs(progress) == 6000


class TestRemaining:
    """Remaining counter updates."""

    def test_remaining_for_good(self, three_steps):
        learning = LearningSteps(three_steps)
        assert learning.remaining_for_good(3) == 2
        assert learning.remaining_for_good(2) == 1
        assert learning.remaining_for_good(1) == 0
        assert learning.remaining_for_good(0) == 0

    def test_remaining_for_failed_resets(self, three_steps):
        assert LearningSteps(three_steps).remaining_for_failed() == 3


class TestToSecs:
    """Minute to second conversion."""

    @pytest.mark.parametrize(
        "minutes,expected",
        [
            (1.0, 60),
            (10.0, 600),
            (0.5, 30),
            (0.0, 0),
            (1440.0, 86400),
            (1 / 120, 0),  # half a second truncates
        ],
    )
    def test_conversion(self, minutes, expected):
        assert to_secs(minutes) == expected

    def test_negative_is_zero(self):
        assert to_secs(-5.0) == 0

    def test_nan_is_zero(self):
        assert to_secs(math.nan) == 0

    @pytest.mark.parametrize("minutes", [1e12, 1e30, 1e39, math.inf])
    def test_huge_values_saturate(self, minutes):
        assert to_secs(minutes) == U32_MAX

    def test_hard_saturates(self):
        """Doubling and summing a maximal step never exceeds the range."""
        learning = LearningSteps([1e12])
        assert learning.hard_delay_secs(1) == U32_MAX // 2

        learning = LearningSteps([1e12, 1.0])
        assert learning.hard_delay_secs(2) == U32_MAX // 2


class TestSaturatingArithmetic:
    def test_add(self):
        assert saturating_add(1, 2) == 3
        assert saturating_add(U32_MAX, 1) == U32_MAX

    def test_mul(self):
        assert saturating_mul(3, 2) == 6
        assert saturating_mul(U32_MAX, 2) == U32_MAX

    def test_sub(self):
        assert saturating_sub(5, 2) == 3
        assert saturating_sub(2, 5) == 0


class TestLearningStepsView:
    """The step list is borrowed, not copied."""

    def test_steps_not_copied(self, two_steps):
        assert LearningSteps(two_steps).steps is two_steps

    def test_equality(self, two_steps):
        assert LearningSteps(two_steps) == LearningSteps(tuple(two_steps))
        assert LearningSteps(two_steps) != LearningSteps([1.0])

    def test_len(self, three_steps):
        assert len(LearningSteps(three_steps)) == 3
        assert not LearningSteps([])

    def test_queries_are_idempotent(self, three_steps):
        learning = LearningSteps(three_steps)
        for remaining in (0, 1, 2, 3, 1002):
            first = (
                learning.hard_delay_secs(remaining),
                learning.good_delay_secs(remaining),
                learning.current_delay_secs(remaining),
                learning.remaining_for_good(remaining),
            )
            second = (
                learning.hard_delay_secs(remaining),
                learning.good_delay_secs(remaining),
                learning.current_delay_secs(remaining),
                learning.remaining_for_good(remaining),
            )
            assert first == second
        assert three_steps == [1.0, 10.0, 100.0]

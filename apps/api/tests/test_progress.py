"""
Tests for progress computation (pure, no database).
"""
import pytest

from apps.legalization.progress import compute_progress


class TestComputeProgress:
    """planned/done -> remaining, overflow, percent."""

    def test_partial_progress_of_a_multi_category_plan(self):
        """340 planned, 100 + 5 + 1 done."""
        progress = compute_progress(340, [100, 5, 1])

        assert progress.planned == 340
        assert progress.done == 106
        assert progress.remaining == 234
        assert progress.overflow == 0
        assert progress.percent == 31

    def test_overflow_caps_percent_at_100(self):
        progress = compute_progress(10, [7, 8])

        assert progress.done == 15
        assert progress.remaining == 0
        assert progress.overflow == 5
        assert progress.percent == 100

    def test_exact_completion(self):
        progress = compute_progress(10, [10])

        assert progress.remaining == 0
        assert progress.overflow == 0
        assert progress.percent == 100

    @pytest.mark.parametrize('planned', [0, -3, None, float('nan'), float('inf'), 'abc'])
    def test_invalid_planned_counts_as_zero(self, planned):
        progress = compute_progress(planned, [4])

        assert progress.planned == 0
        assert progress.percent == 0
        assert progress.overflow == 4
        assert progress.remaining == 0

    def test_negative_count_contributes_nothing(self):
        assert compute_progress(10, [-5]).done == 0

    def test_fractional_count_is_floored(self):
        assert compute_progress(10, [3.7]).done == 3

    def test_missing_and_non_finite_counts_are_ignored(self):
        assert compute_progress(10, [None, float('nan'), 2]).done == 2

    def test_no_entries(self):
        progress = compute_progress(25, [])

        assert progress.done == 0
        assert progress.remaining == 25
        assert progress.percent == 0

    def test_percent_rounds_half_up(self):
        # 1/8 = 12.5%
        assert compute_progress(8, [1]).percent == 13
        # 1/3 = 33.3%
        assert compute_progress(3, [1]).percent == 33

    @pytest.mark.parametrize('planned,counts', [
        (0, [0]),
        (1, [0]),
        (5, [1, 1]),
        (5, [5]),
        (5, [9]),
        (340, [320, 18, 2]),
        (7, [100, 100]),
    ])
    def test_remaining_and_overflow_are_exclusive(self, planned, counts):
        progress = compute_progress(planned, counts)

        assert progress.done == sum(counts)
        assert progress.remaining >= 0
        assert progress.overflow >= 0
        assert not (progress.remaining > 0 and progress.overflow > 0)
        if progress.done != progress.planned:
            assert (progress.remaining > 0) != (progress.overflow > 0)
        assert 0 <= progress.percent <= 100

    def test_as_dict(self):
        assert compute_progress(4, [1]).as_dict() == {
            'planned': 4,
            'done': 1,
            'remaining': 3,
            'overflow': 0,
            'percent': 25,
        }

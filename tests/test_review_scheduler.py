"""
Tests for the Review Scheduler

Tests cover:
- Fixed one-day interval after a failed review
- Fixed three-day interval after a passed review
"""

from datetime import datetime, timedelta, timezone

import pytest

from langfu_app.modules.words.logics.review_scheduler import ReviewIntervals, compute_next_review


NOW = datetime(2024, 3, 10, 8, 30, tzinfo=timezone.utc)


class TestComputeNextReview:
    """Test the two-bucket interval policy."""

    def test_failed_review_is_due_next_day(self):
        assert compute_next_review(False, NOW) == NOW + timedelta(days=1)

    def test_passed_review_is_due_in_three_days(self):
        assert compute_next_review(True, NOW) == NOW + timedelta(days=3)

    @pytest.mark.parametrize('correct', [True, False])
    def test_interval_is_independent_of_history(self, correct):
        """The same outcome always yields the same interval."""
        later = NOW + timedelta(days=40)
        assert compute_next_review(correct, later) - later == compute_next_review(correct, NOW) - NOW

    def test_intervals_constants(self):
        assert ReviewIntervals.FAILED == timedelta(days=1)
        assert ReviewIntervals.PASSED == timedelta(days=3)

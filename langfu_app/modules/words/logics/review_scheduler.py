"""
Review Scheduler - pure next-review calculation.

Fixed two-bucket policy: a failed review comes back the next day, a
successful one after three days. The interval does not grow with mastery.
"""

import datetime


class ReviewIntervals:
    """Intervals used by the scheduler."""
    FAILED = datetime.timedelta(days=1)
    PASSED = datetime.timedelta(days=3)


def compute_next_review(correct: bool, now: datetime.datetime) -> datetime.datetime:
    """Return the due date of the next review of a word reviewed at ``now``."""
    if not correct:
        return now + ReviewIntervals.FAILED
    return now + ReviewIntervals.PASSED

import math
from datetime import datetime, timedelta
from typing import NamedTuple

# Quality scale (0-5) anchors used by the pass/fail mapping
QUALITY_GOOD = 4           # Correct, with some hesitation
QUALITY_BARELY_RECALLED = 1  # Wrong, answer looked familiar once seen
PASSING_QUALITY = 3

MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
DEFAULT_INTERVAL_DAYS = 1
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6


class ReviewState(NamedTuple):
    """Scheduling parameters of one (user, question) pair"""
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval_days: int = DEFAULT_INTERVAL_DAYS
    repetitions: int = 0


class SM2Algorithm:
    """
    SM-2 spaced repetition algorithm for calculating review intervals.
    Based on SuperMemo 2 algorithm by Piotr Wozniak.
    """

    @staticmethod
    def quality_from_outcome(is_correct: bool) -> int:
        """
        Convert a pass/fail answer into an SM-2 quality score.

        Correct answers score 4 ("good"), incorrect ones 1 ("barely recalled").
        Swap this out to feed a richer signal (confidence, response time)
        without touching the interval arithmetic.
        """
        return QUALITY_GOOD if is_correct else QUALITY_BARELY_RECALLED

    @staticmethod
    def update_ease_factor(ease_factor: float, quality: int) -> float:
        """EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3"""
        new_ef = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
        return max(MIN_EASE_FACTOR, new_ef)

    @staticmethod
    def next_state(state: ReviewState, quality: int) -> ReviewState:
        """
        Compute the scheduling parameters after one review.

        Args:
            state: Current parameters, or ReviewState() for a first review
            quality: Response quality (0-5). Below 3 counts as a failed recall

        Returns:
            ReviewState with the new ease factor, interval and repetitions
        """
        if quality < 0 or quality > 5:
            raise ValueError(f"Quality must be between 0 and 5, got {quality}")

        new_ef = SM2Algorithm.update_ease_factor(state.ease_factor, quality)

        # If quality < 3, reset repetitions (failed recall)
        if quality < PASSING_QUALITY:
            new_repetitions = 0
            new_interval = DEFAULT_INTERVAL_DAYS
        else:
            new_repetitions = state.repetitions + 1

            if new_repetitions == 1:
                new_interval = FIRST_INTERVAL_DAYS
            elif new_repetitions == 2:
                new_interval = SECOND_INTERVAL_DAYS
            else:
                # Half rounds up; intervals are always positive
                new_interval = math.floor(state.interval_days * new_ef + 0.5)

        return ReviewState(
            ease_factor=new_ef,
            interval_days=max(1, new_interval),
            repetitions=new_repetitions,
        )

    @staticmethod
    def next_review_at(reviewed_at: datetime, interval_days: int) -> datetime:
        """Due timestamp for a review made at `reviewed_at`"""
        return reviewed_at + timedelta(days=interval_days)

    @staticmethod
    def is_due_for_review(next_review_at: datetime, as_of: datetime) -> bool:
        """Check if an item is due for review"""
        return next_review_at <= as_of

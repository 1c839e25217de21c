from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Mapping, Optional, Union
from pydantic import ValidationError
from sqlalchemy.orm import Session
from acca_prep.clock import Clock, SystemClock
from acca_prep.config import settings
from acca_prep.crud import (
    get_review,
    upsert_review,
    get_due_reviews,
    get_reviews_for_user,
    get_reviews_with_questions,
    count_reviewed_since,
    get_session_dates
)
from acca_prep.errors import InvalidArgument
from acca_prep.models import QuestionReview
from acca_prep.schemas import ReviewOutcome, ReviewStats, TopicMastery, StreakData
from acca_prep.sm2 import SM2Algorithm, ReviewState, MIN_EASE_FACTOR, DEFAULT_EASE_FACTOR

# Mastery blends pooled accuracy with where the average ease sits in this range
MASTERY_EASE_CEILING = 3.0
MASTERY_ACCURACY_WEIGHT = 0.7
MASTERY_EASE_WEIGHT = 0.3
STRUGGLING_BELOW = 40
LEARNING_BELOW = 70


def _require_id(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{name} must be a non-empty string")
    return value


class ReviewScheduler:
    """
    Spaced repetition scheduler for question reviews.

    Every call reads through to the review store; nothing is cached, so
    results reflect whatever other processes have written.
    """

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self.clock = clock or SystemClock()

    def now(self) -> datetime:
        """Current time from the clock as aware UTC; naive readings are taken as UTC"""
        current = self.clock.now()
        if current.tzinfo is None:
            return current.replace(tzinfo=timezone.utc)
        return current.astimezone(timezone.utc)

    def record_review(self, user_id: str, item_id: str, is_correct: bool) -> QuestionReview:
        """
        Apply one answered question to its review record.

        The first review of a pair starts from the default state and goes
        through the same update as every later review.

        Raises:
            InvalidArgument: empty user or item id
            StorageError: the store could not read or write the record
        """
        _require_id("user_id", user_id)
        _require_id("item_id", item_id)

        quality = SM2Algorithm.quality_from_outcome(is_correct)
        existing = get_review(self.db, user_id, item_id)
        state = ReviewState() if existing is None else ReviewState(
            ease_factor=existing.ease_factor,
            interval_days=existing.interval_days,
            repetitions=existing.repetitions
        )
        new_state = SM2Algorithm.next_state(state, quality)

        now = self.now()
        return upsert_review(
            self.db,
            user_id,
            item_id,
            state=new_state,
            reviewed_at=now,
            next_review_at=SM2Algorithm.next_review_at(now, new_state.interval_days),
            is_correct=bool(is_correct)
        )

    def record_batch_reviews(
        self,
        user_id: str,
        outcomes: Iterable[Union[ReviewOutcome, Mapping[str, Any]]]
    ) -> List[QuestionReview]:
        """
        Apply outcomes one at a time, in order.

        Every outcome is validated before the first review is applied. After
        that the batch is not atomic: each review commits on its own, and the
        first failure stops the batch with earlier reviews already saved.
        """
        _require_id("user_id", user_id)
        try:
            parsed = [
                outcome if isinstance(outcome, ReviewOutcome) else ReviewOutcome.model_validate(outcome)
                for outcome in outcomes
            ]
        except ValidationError as exc:
            raise InvalidArgument(f"invalid review outcome: {exc}") from exc
        return [
            self.record_review(user_id, outcome.item_id, outcome.is_correct)
            for outcome in parsed
        ]

    def get_due_items(self, user_id: str, as_of: Optional[datetime] = None) -> List[str]:
        """Ids of questions due at `as_of` (default now), most overdue first"""
        _require_id("user_id", user_id)
        as_of = as_of or self.now()
        return [review.question_id for review in get_due_reviews(self.db, user_id, as_of)]

    def get_review_stats(self, user_id: str) -> Optional[ReviewStats]:
        """
        Due count, record count and average accuracy for a user.

        Accuracy is the mean of each question's own correct/seen ratio, so a
        question seen once weighs as much as one seen fifty times. Returns
        None when the user has never reviewed anything.
        """
        _require_id("user_id", user_id)
        reviews = get_reviews_for_user(self.db, user_id)
        if not reviews:
            return None

        now = self.now()
        return ReviewStats(
            due_count=sum(1 for r in reviews if SM2Algorithm.is_due_for_review(r.next_review_at, now)),
            total_reviewed=len(reviews),
            avg_accuracy=sum(r.accuracy for r in reviews) / len(reviews)
        )

    def get_topic_mastery(self, user_id: str, paper: str) -> List[TopicMastery]:
        """Per-unit mastery for one paper, weakest unit first"""
        _require_id("user_id", user_id)
        _require_id("paper", paper)
        now = self.now()

        units = {}
        for review, question in get_reviews_with_questions(self.db, user_id, paper):
            unit_code = question.unit_code or "Other"
            unit = units.setdefault(unit_code, {
                "total_seen": 0,
                "total_correct": 0,
                "ease_sum": 0.0,
                "due_count": 0,
                "count": 0
            })
            unit["total_seen"] += review.times_seen
            unit["total_correct"] += review.times_correct
            unit["ease_sum"] += review.ease_factor
            unit["count"] += 1
            if SM2Algorithm.is_due_for_review(review.next_review_at, now):
                unit["due_count"] += 1

        results = []
        for unit_code, unit in units.items():
            accuracy = unit["total_correct"] / unit["total_seen"] * 100 if unit["total_seen"] else 0.0
            avg_ease = unit["ease_sum"] / unit["count"] if unit["count"] else DEFAULT_EASE_FACTOR
            ease_score = (avg_ease - MIN_EASE_FACTOR) / (MASTERY_EASE_CEILING - MIN_EASE_FACTOR) * 100
            mastery = min(100.0, accuracy * MASTERY_ACCURACY_WEIGHT + ease_score * MASTERY_EASE_WEIGHT)

            if mastery < STRUGGLING_BELOW:
                status = "struggling"
            elif mastery < LEARNING_BELOW:
                status = "learning"
            else:
                status = "mastered"

            results.append(TopicMastery(
                unit_code=unit_code,
                total_seen=unit["total_seen"],
                total_correct=unit["total_correct"],
                accuracy=accuracy,
                avg_ease_factor=avg_ease,
                due_count=unit["due_count"],
                count=unit["count"],
                mastery=mastery,
                status=status
            ))

        return sorted(results, key=lambda m: (m.mastery, m.unit_code))

    def get_streak_data(self, user_id: str) -> StreakData:
        """
        Today's review count against the daily target, plus the current streak.

        The streak counts consecutive UTC days with a logged session. It is
        measured back from yesterday while today has no activity yet, so an
        unbroken run is not reported lost before the day is over.
        """
        _require_id("user_id", user_id)
        now = self.now()
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        today = start_of_today.date()

        reviewed_today = count_reviewed_since(self.db, user_id, start_of_today)
        active_days = set(get_session_dates(self.db, user_id))
        if reviewed_today:
            active_days.add(today)

        day = today if today in active_days else today - timedelta(days=1)
        streak = 0
        while day in active_days:
            streak += 1
            day -= timedelta(days=1)

        return StreakData(
            current_streak=streak,
            daily_target=settings.daily_review_target,
            reviewed_today=reviewed_today
        )

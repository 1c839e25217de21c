from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from acca_prep.errors import StorageError
from acca_prep.logging import get_logger
from acca_prep.models import QuestionReview, Question
from acca_prep.sm2 import ReviewState

logger = get_logger(__name__)


@contextmanager
def storage_errors(db: Session, action: str, **context):
    """Roll back and re-raise driver failures as StorageError"""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("storage_failure", action=action, error=str(exc), **context)
        raise StorageError(f"{action} failed: {exc}") from exc


def get_review(db: Session, user_id: str, question_id: str) -> Optional[QuestionReview]:
    """Get the review record for one user and question

    Reads go to the database even when the record is already loaded in this
    session, so writes from other sessions are never masked.
    """
    with storage_errors(db, "get_review", user_id=user_id, question_id=question_id):
        return db.get(QuestionReview, (user_id, question_id), populate_existing=True)


def upsert_review(
    db: Session,
    user_id: str,
    question_id: str,
    state: ReviewState,
    reviewed_at: datetime,
    next_review_at: datetime,
    is_correct: bool
) -> QuestionReview:
    """
    Create or update the review record and commit.

    Counters start at zero for a new record; `times_seen` and exactly one of
    `times_correct` / `times_incorrect` are incremented.
    """
    with storage_errors(db, "upsert_review", user_id=user_id, question_id=question_id):
        review = db.get(QuestionReview, (user_id, question_id), populate_existing=True)
        if review is None:
            review = QuestionReview(
                user_id=user_id,
                question_id=question_id,
                times_seen=0,
                times_correct=0,
                times_incorrect=0
            )
            db.add(review)

        review.last_reviewed_at = reviewed_at
        review.next_review_at = next_review_at
        review.ease_factor = state.ease_factor
        review.interval_days = state.interval_days
        review.repetitions = state.repetitions
        review.times_seen += 1
        if is_correct:
            review.times_correct += 1
        else:
            review.times_incorrect += 1

        db.commit()
        db.refresh(review)

    logger.debug(
        "review_upserted",
        user_id=user_id,
        question_id=question_id,
        interval_days=review.interval_days,
        repetitions=review.repetitions
    )
    return review


def get_due_reviews(db: Session, user_id: str, as_of: datetime) -> List[QuestionReview]:
    """Get records due at `as_of`, most overdue first"""
    with storage_errors(db, "get_due_reviews", user_id=user_id):
        return db.query(QuestionReview).filter(
            QuestionReview.user_id == user_id,
            QuestionReview.next_review_at <= as_of
        ).order_by(
            QuestionReview.next_review_at.asc(),
            QuestionReview.question_id.asc()
        ).populate_existing().all()


def get_reviews_for_user(db: Session, user_id: str) -> List[QuestionReview]:
    """Get all review records for user"""
    with storage_errors(db, "get_reviews_for_user", user_id=user_id):
        return db.query(QuestionReview).filter(
            QuestionReview.user_id == user_id
        ).populate_existing().all()


def get_reviews_with_questions(
    db: Session,
    user_id: str,
    paper: str
) -> List[Tuple[QuestionReview, Question]]:
    """Get the user's review records joined with question bank entries for one paper"""
    with storage_errors(db, "get_reviews_with_questions", user_id=user_id, paper=paper):
        return db.query(QuestionReview, Question).join(
            Question, Question.id == QuestionReview.question_id
        ).filter(
            QuestionReview.user_id == user_id,
            Question.paper == paper
        ).populate_existing().all()


def count_reviewed_since(db: Session, user_id: str, since: datetime) -> int:
    """Count records last reviewed at or after `since`"""
    with storage_errors(db, "count_reviewed_since", user_id=user_id):
        return db.query(func.count()).select_from(QuestionReview).filter(
            QuestionReview.user_id == user_id,
            QuestionReview.last_reviewed_at >= since
        ).scalar()

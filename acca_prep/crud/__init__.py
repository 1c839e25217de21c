from acca_prep.crud.question_review import (
    get_review,
    upsert_review,
    get_due_reviews,
    get_reviews_for_user,
    get_reviews_with_questions,
    count_reviewed_since
)
from acca_prep.crud.question import add_questions, get_question
from acca_prep.crud.study_session import (
    record_study_session,
    get_study_sessions,
    get_session_dates
)

__all__ = [
    "get_review",
    "upsert_review",
    "get_due_reviews",
    "get_reviews_for_user",
    "get_reviews_with_questions",
    "count_reviewed_since",
    "add_questions",
    "get_question",
    "record_study_session",
    "get_study_sessions",
    "get_session_dates",
]

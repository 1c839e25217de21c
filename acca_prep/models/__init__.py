from acca_prep.models.question_review import QuestionReview
from acca_prep.models.question import Question
from acca_prep.models.study_session import StudySession

__all__ = [
    "QuestionReview",
    "Question",
    "StudySession",
]

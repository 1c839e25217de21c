from sqlalchemy import Column, Integer, String, Float, Index
from acca_prep.database import Base, UTCDateTime
from acca_prep.sm2 import DEFAULT_EASE_FACTOR, DEFAULT_INTERVAL_DAYS

class QuestionReview(Base):
    """SM-2 spaced repetition state per user and question"""
    __tablename__ = "question_reviews"
    
    user_id = Column(String, primary_key=True)
    question_id = Column(String, primary_key=True)
    
    last_reviewed_at = Column(UTCDateTime, nullable=False)
    next_review_at = Column(UTCDateTime, nullable=False, index=True)
    
    # SM-2 algorithm fields
    ease_factor = Column(Float, nullable=False, default=DEFAULT_EASE_FACTOR)  # >= 1.3
    interval_days = Column(Integer, nullable=False, default=DEFAULT_INTERVAL_DAYS)  # >= 1
    repetitions = Column(Integer, nullable=False, default=0)  # consecutive passes
    
    # Lifetime counters (analytics only)
    times_seen = Column(Integer, nullable=False, default=0)
    times_correct = Column(Integer, nullable=False, default=0)
    times_incorrect = Column(Integer, nullable=False, default=0)
    
    __table_args__ = (
        Index("ix_question_reviews_user_next_review", "user_id", "next_review_at"),
    )

    @property
    def accuracy(self) -> float:
        """Share of this question's attempts answered correctly"""
        if not self.times_seen:
            return 0.0
        return self.times_correct / self.times_seen

    def __repr__(self):
        return (
            f"<QuestionReview(user_id={self.user_id!r}, question_id={self.question_id!r}, "
            f"next_review_at={self.next_review_at})>"
        )

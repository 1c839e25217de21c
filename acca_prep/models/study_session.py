from sqlalchemy import Column, Integer, String, Text
from acca_prep.database import Base, UTCDateTime, utcnow

SESSION_TYPES = ("quiz", "flashcards", "review")

class StudySession(Base):
    """Aggregate outcome of one study session"""
    __tablename__ = "study_sessions"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    
    session_type = Column(String, nullable=False)  # "quiz", "flashcards" or "review"
    started_at = Column(UTCDateTime, nullable=False)
    questions_answered = Column(Integer, nullable=False, default=0)
    questions_correct = Column(Integer, nullable=False, default=0)
    questions_incorrect = Column(Integer, nullable=False, default=0)
    notes = Column(Text)
    
    created_at = Column(UTCDateTime, default=utcnow)

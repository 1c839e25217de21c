from sqlalchemy.orm import Session
from acca_prep.crud.question_review import storage_errors
from acca_prep.errors import InvalidArgument
from acca_prep.logging import get_logger
from acca_prep.models import StudySession
from acca_prep.models.study_session import SESSION_TYPES
from acca_prep.database import utcnow
from datetime import date, datetime, timezone
from typing import List, Optional

logger = get_logger(__name__)

def record_study_session(
    db: Session,
    user_id: str,
    session_type: str,
    questions_correct: int,
    questions_incorrect: int,
    started_at: Optional[datetime] = None,
    notes: Optional[str] = None
) -> StudySession:
    """
    Record the aggregate outcome of a study session.
    
    Args:
        session_type: "quiz", "flashcards" or "review"
        started_at: Defaults to now (UTC)
    """
    if not user_id or not user_id.strip():
        raise InvalidArgument("user_id must be a non-empty string")
    if session_type not in SESSION_TYPES:
        raise InvalidArgument(f"session_type must be one of {', '.join(SESSION_TYPES)}, got {session_type!r}")
    if questions_correct < 0 or questions_incorrect < 0:
        raise InvalidArgument("question counts must not be negative")
    
    session = StudySession(
        user_id=user_id,
        session_type=session_type,
        started_at=started_at or utcnow(),
        questions_answered=questions_correct + questions_incorrect,
        questions_correct=questions_correct,
        questions_incorrect=questions_incorrect,
        notes=notes
    )
    with storage_errors(db, "record_study_session", user_id=user_id):
        db.add(session)
        db.commit()
        db.refresh(session)
    
    logger.info(
        "study_session_recorded",
        user_id=user_id,
        session_type=session_type,
        answered=session.questions_answered
    )
    return session

def get_study_sessions(db: Session, user_id: str, limit: int = 50) -> List[StudySession]:
    """Get recent study sessions for a user"""
    with storage_errors(db, "get_study_sessions", user_id=user_id):
        return db.query(StudySession).filter(
            StudySession.user_id == user_id
        ).order_by(StudySession.started_at.desc()).limit(limit).all()

def get_session_dates(db: Session, user_id: str) -> List[date]:
    """Distinct UTC dates on which the user logged a session, newest first"""
    with storage_errors(db, "get_session_dates", user_id=user_id):
        started = db.query(StudySession.started_at).filter(
            StudySession.user_id == user_id
        ).all()
    
    dates = {row.started_at.astimezone(timezone.utc).date() for row in started}
    return sorted(dates, reverse=True)

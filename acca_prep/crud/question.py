from sqlalchemy.orm import Session
from acca_prep.crud.question_review import storage_errors
from acca_prep.logging import get_logger
from acca_prep.models import Question
from acca_prep.schemas import QuestionCreate
from typing import List, Optional

logger = get_logger(__name__)

def add_questions(db: Session, items: List[QuestionCreate]) -> int:
    """Insert new questions and update existing ones by id"""
    written = 0
    # Later rows win when an id repeats
    unique = {item.id: item for item in items}
    with storage_errors(db, "add_questions"):
        for item in unique.values():
            existing = db.get(Question, item.id)
            if existing:
                for key, value in item.model_dump(exclude={"id"}).items():
                    setattr(existing, key, value)
            else:
                db.add(Question(**item.model_dump()))
            written += 1
        db.commit()
    
    logger.info("questions_imported", count=written)
    return written

def get_question(db: Session, question_id: str) -> Optional[Question]:
    """Get question by ID"""
    with storage_errors(db, "get_question", question_id=question_id):
        return db.get(Question, question_id)

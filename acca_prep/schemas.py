from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

class ReviewOutcome(BaseModel):
    """Result of a single answered question"""
    item_id: str = Field(min_length=1)
    is_correct: bool

    @field_validator("item_id")
    @classmethod
    def item_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("item_id must not be blank")
        return value

class ReviewRecordResponse(BaseModel):
    """Schema for a stored review record"""
    user_id: str
    question_id: str
    last_reviewed_at: datetime
    next_review_at: datetime
    ease_factor: float
    interval_days: int
    repetitions: int
    times_seen: int
    times_correct: int
    times_incorrect: int

    class Config:
        from_attributes = True

class ReviewStats(BaseModel):
    """Summary counters for the review dashboard"""
    due_count: int
    total_reviewed: int
    avg_accuracy: float = Field(description="Mean of per-question accuracy, 0-1")

class TopicMastery(BaseModel):
    """Mastery of one syllabus unit within a paper"""
    unit_code: str
    total_seen: int
    total_correct: int
    accuracy: float = Field(description="Pooled accuracy for the unit, percent")
    avg_ease_factor: float
    due_count: int
    count: int
    mastery: float = Field(description="0-100 blend of accuracy and ease")
    status: str  # "struggling", "learning" or "mastered"

class StreakData(BaseModel):
    """Daily review progress"""
    current_streak: int
    daily_target: int
    reviewed_today: int

class QuestionCreate(BaseModel):
    """Schema for importing a question bank entry"""
    id: str = Field(min_length=1)
    paper: str = Field(min_length=1)
    unit_code: Optional[str] = None
    stem: str = ""

class StudySessionCreate(BaseModel):
    """Schema for logging a study session"""
    user_id: str = Field(min_length=1)
    session_type: Literal["quiz", "flashcards", "review"]
    questions_correct: int = Field(ge=0)
    questions_incorrect: int = Field(ge=0)
    started_at: Optional[datetime] = None
    notes: Optional[str] = None

from sqlalchemy import Column, String, Text
from acca_prep.database import Base, UTCDateTime, utcnow

class Question(Base):
    """Question bank entry, tagged with ACCA paper and syllabus unit"""
    __tablename__ = "questions"
    
    id = Column(String, primary_key=True)
    paper = Column(String, nullable=False, index=True)  # FA, MA, PM, ...
    unit_code = Column(String)  # syllabus area, e.g. "A1"
    stem = Column(Text, nullable=False, default="")
    created_at = Column(UTCDateTime, default=utcnow)

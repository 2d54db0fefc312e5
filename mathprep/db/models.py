from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from mathprep.db.base import Base


def utcnow():
    """Function to return current UTC time with timezone info"""
    return datetime.now(timezone.utc)


class Question(Base):
    __tablename__ = "questions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    topic = Column(Text, nullable=False, index=True)
    question = Column(Text, nullable=False)
    correct_answer = Column(Text, nullable=True)
    wrong_options = Column(JSON, nullable=False, default=list)
    difficulty = Column(String(16), nullable=False, default="medium")
    question_type = Column(String(16), nullable=False, default="mcq")
    pattern = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    attempts = relationship("UserProgress", back_populates="question")


class UserProgress(Base):
    __tablename__ = "user_progress"
    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=True)
    correct = Column(Boolean, nullable=False)
    attempt_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    question = relationship("Question", back_populates="attempts")

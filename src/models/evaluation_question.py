from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class EvaluationQuestionModel(Base):
    __tablename__ = "evaluation_questions"

    id = Column(String, primary_key=True, index=True, default=new_id)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    teacher_id = Column(String, index=True, nullable=False)
    unit = Column(String, nullable=False)
    question_number = Column(String, nullable=False)
    # JSON-encoded list of question items
    questions = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    course = relationship("CourseModel", back_populates="evaluation_questions")

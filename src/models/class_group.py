from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class ClassGroupModel(Base):
    __tablename__ = "class_groups"

    id = Column(String, primary_key=True, index=True, default=new_id)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    teacher_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    period = Column(String, nullable=True)
    # JSON-encoded list of {day, period}
    schedules = Column(Text, nullable=False, default="[]")
    student_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    course = relationship("CourseModel", back_populates="class_groups")
    attendances = relationship(
        "AttendanceModel",
        back_populates="class_group",
        cascade="all, delete-orphan",
    )

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class CourseModel(Base):
    __tablename__ = "courses"

    id = Column(String, primary_key=True, index=True, default=new_id)
    teacher_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    academic_year = Column(String, nullable=False)
    semester = Column(String, nullable=False)
    subject_group = Column(String, nullable=False)
    subject_area = Column(String, nullable=False)
    career_track = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    grade = Column(String, nullable=False)
    instructor = Column(String, nullable=False)
    classroom = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    join_code = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    class_groups = relationship(
        "ClassGroupModel",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    assignments = relationship(
        "AssignmentModel",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    evaluation_questions = relationship(
        "EvaluationQuestionModel",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    enrollments = relationship(
        "CourseEnrollmentModel",
        back_populates="course",
        cascade="all, delete-orphan",
    )


class CourseEnrollmentModel(Base):
    __tablename__ = "course_enrollments"
    __table_args__ = (
        UniqueConstraint("course_id", "student_id", name="uq_course_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    student_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    joined_at = Column(DateTime, nullable=False, default=utcnow)

    course = relationship("CourseModel", back_populates="enrollments")

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class AssignmentModel(Base):
    __tablename__ = "assignments"

    id = Column(String, primary_key=True, index=True, default=new_id)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    teacher_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    course = relationship("CourseModel", back_populates="assignments")
    attachments = relationship(
        "AssignmentAttachmentModel",
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="AssignmentAttachmentModel.created_at",
    )


class AssignmentAttachmentModel(Base):
    __tablename__ = "assignment_attachments"

    id = Column(String, primary_key=True, index=True, default=new_id)
    assignment_id = Column(
        String, ForeignKey("assignments.id", ondelete="CASCADE"), index=True
    )
    file_path = Column(String, nullable=False)
    original_file_name = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    assignment = relationship("AssignmentModel", back_populates="attachments")

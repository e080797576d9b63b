from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class SchoolModel(Base):
    __tablename__ = "schools"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, unique=True, index=True, nullable=False)
    school_type = Column(String, nullable=False)
    admin_user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=True
    )
    created_by = Column(String, nullable=True)
    contact_name = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    # JSON-encoded list of {grade, classCount, studentCount}
    grade_info = Column(Text, nullable=False, default="[]")
    total_classes = Column(Integer, nullable=False, default=0)
    total_students = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="active")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    admin_user = relationship(
        "UserModel",
        back_populates="administered_school",
        foreign_keys=[admin_user_id],
    )

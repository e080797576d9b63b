"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)
    name = Column(String, nullable=True)
    school = Column(String, nullable=True, index=True)
    region = Column(String, nullable=True)
    # 'student', 'teacher', 'admin', 'superadmin' or 'staff'
    role = Column(String, nullable=True, index=True)
    email_verified = Column(DateTime, nullable=True)
    verification_token = Column(String, nullable=True, index=True)
    verification_token_expiry = Column(DateTime, nullable=True)
    reset_token = Column(String, nullable=True, index=True)
    reset_token_expiry = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    student_profile = relationship(
        "StudentProfileModel",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    teacher_profile = relationship(
        "TeacherProfileModel",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    admin_profile = relationship(
        "AdminProfileModel",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    administered_school = relationship(
        "SchoolModel",
        back_populates="admin_user",
        uselist=False,
        cascade="all, delete-orphan",
        foreign_keys="SchoolModel.admin_user_id",
    )

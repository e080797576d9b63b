"""Role profile models (student, teacher, admin), one row per user."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class StudentProfileModel(Base):
    __tablename__ = "student_profiles"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )
    student_id = Column(String, nullable=True)
    school = Column(String, nullable=True)
    grade = Column(String, nullable=True)
    class_label = Column(String, nullable=True)
    section = Column(String, nullable=True)
    seat_number = Column(String, nullable=True)
    major = Column(String, nullable=True)
    sex = Column(String, nullable=True)
    class_officer = Column(String, nullable=True)
    special_education = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    siblings = Column(String, nullable=True)
    academic_status = Column(String, nullable=True)
    remarks = Column(Text, nullable=True)
    club = Column(String, nullable=True)
    club_teacher = Column(String, nullable=True)
    club_location = Column(String, nullable=True)
    date_of_birth = Column(String, nullable=True)
    address = Column(String, nullable=True)
    resident_registration_number = Column(String, nullable=True)
    mother_name = Column(String, nullable=True)
    mother_phone = Column(String, nullable=True)
    mother_remarks = Column(Text, nullable=True)
    father_name = Column(String, nullable=True)
    father_phone = Column(String, nullable=True)
    father_remarks = Column(Text, nullable=True)
    elective_subjects = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("UserModel", back_populates="student_profile")


class TeacherProfileModel(Base):
    __tablename__ = "teacher_profiles"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )
    school = Column(String, nullable=True)
    role_label = Column(String, nullable=True)
    major = Column(String, nullable=True)
    class_label = Column(String, nullable=True)
    grade = Column(String, nullable=True)
    section = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    remarks = Column(Text, nullable=True)
    club = Column(String, nullable=True)
    club_location = Column(String, nullable=True)
    date_of_birth = Column(String, nullable=True)
    address = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("UserModel", back_populates="teacher_profile")


class AdminProfileModel(Base):
    __tablename__ = "admin_profiles"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )
    school_id = Column(String, ForeignKey("schools.id", ondelete="SET NULL"), nullable=True)
    phone_number = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("UserModel", back_populates="admin_profile")
    school = relationship("SchoolModel")

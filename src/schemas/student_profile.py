"""Student profile schemas."""

from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .user import User


class StudentProfileFields(CamelModel):
    student_id: Optional[str] = Field(default=None, max_length=50)
    grade: Optional[str] = Field(default=None, max_length=10)
    class_label: Optional[str] = Field(default=None, max_length=50)
    section: Optional[str] = Field(default=None, max_length=50)
    seat_number: Optional[str] = Field(default=None, max_length=10)
    major: Optional[str] = Field(default=None, max_length=100)
    sex: Optional[str] = Field(default=None, max_length=10)
    class_officer: Optional[str] = Field(default=None, max_length=50)
    special_education: Optional[str] = Field(default=None, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    siblings: Optional[str] = Field(default=None, max_length=100)
    academic_status: Optional[str] = Field(default=None, max_length=100)
    remarks: Optional[str] = Field(default=None, max_length=500)
    club: Optional[str] = Field(default=None, max_length=100)
    club_teacher: Optional[str] = Field(default=None, max_length=50)
    club_location: Optional[str] = Field(default=None, max_length=100)
    date_of_birth: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=200)
    resident_registration_number: Optional[str] = Field(default=None, max_length=50)
    mother_name: Optional[str] = Field(default=None, max_length=50)
    mother_phone: Optional[str] = Field(default=None, max_length=20)
    mother_remarks: Optional[str] = Field(default=None, max_length=500)
    father_name: Optional[str] = Field(default=None, max_length=50)
    father_phone: Optional[str] = Field(default=None, max_length=20)
    father_remarks: Optional[str] = Field(default=None, max_length=500)
    elective_subjects: Optional[List[str]] = None


class StudentProfileUpdateRequest(StudentProfileFields):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    school: Optional[str] = Field(default=None, max_length=100)
    region: Optional[str] = Field(default=None, max_length=50)


class StudentProfileInfo(StudentProfileFields):
    id: str
    school: Optional[str] = None


class StudentProfileResponse(CamelModel):
    user: User
    profile: Optional[StudentProfileInfo] = None

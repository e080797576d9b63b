"""School and admin account schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from .base import CamelModel

SchoolStatus = Literal["active", "inactive", "suspended"]


class GradeInfo(CamelModel):
    grade: str = Field(..., min_length=1, max_length=20)
    class_count: int = Field(..., ge=0)
    student_count: int = Field(..., ge=0)


class CreateAdminRequest(CamelModel):
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=8)
    admin_name: str = Field(..., min_length=1, max_length=50)
    school_name: str = Field(..., min_length=1, max_length=100)
    school_type: str = Field(..., min_length=1, max_length=50)
    contact_name: Optional[str] = Field(default=None, max_length=50)
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    grade_info: List[GradeInfo] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)


class UpdateAdminRequest(CamelModel):
    admin_id: str = Field(..., min_length=1)
    admin_email: EmailStr
    # Blank keeps the current password
    admin_password: Optional[str] = None
    admin_name: str = Field(..., min_length=1, max_length=50)
    school_name: str = Field(..., min_length=1, max_length=100)
    school_type: str = Field(..., min_length=1, max_length=50)
    contact_name: Optional[str] = Field(default=None, max_length=50)
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    grade_info: List[GradeInfo] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)
    status: SchoolStatus = "active"


class DeleteAdminRequest(CamelModel):
    admin_id: str = Field(..., min_length=1)


class SchoolInfo(CamelModel):
    id: str
    name: str
    school_type: str
    admin_user_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    grade_info: List[GradeInfo] = Field(default_factory=list)
    total_classes: int = 0
    total_students: int = 0
    status: str
    notes: Optional[str] = None
    created_at: datetime


class AdminProfileInfo(CamelModel):
    phone_number: Optional[str] = None
    notes: Optional[str] = None


class AdminInfo(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    created_at: datetime
    profile: Optional[AdminProfileInfo] = None
    school: Optional[SchoolInfo] = None


class AdminAccountData(CamelModel):
    user_id: str
    email: str
    school_id: str
    school_name: str


class AdminAccountResponse(CamelModel):
    message: str
    data: AdminAccountData


class SuperadminStats(CamelModel):
    total_admins: int
    active_schools: int
    total_teachers: int
    total_students: int


class SuperadminOverview(CamelModel):
    admins: List[AdminInfo]
    schools: List[SchoolInfo]
    stats: SuperadminStats

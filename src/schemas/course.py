"""Course, class group and attendance schemas."""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import Field, StringConstraints

from .base import CamelModel

Trimmed = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def trimmed(max_length: int):
    return Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=max_length)
    ]


class CourseRequest(CamelModel):
    academic_year: trimmed(9)
    semester: Trimmed
    subject_group: trimmed(50)
    subject_area: trimmed(50)
    career_track: trimmed(50)
    subject: trimmed(50)
    grade: Trimmed
    classroom: trimmed(50)
    description: trimmed(1000)
    instructor: Optional[Annotated[str, StringConstraints(strip_whitespace=True)]] = None


class CourseInfo(CamelModel):
    id: str
    teacher_id: str
    academic_year: str
    semester: str
    subject_group: str
    subject_area: str
    career_track: str
    subject: str
    grade: str
    instructor: str
    classroom: str
    description: str
    join_code: str
    created_at: datetime
    updated_at: datetime


class CourseResponse(CamelModel):
    course: CourseInfo


class CourseListResponse(CamelModel):
    courses: List[CourseInfo]


class JoinCourseRequest(CamelModel):
    join_code: trimmed(20)


class Schedule(CamelModel):
    day: trimmed(20)
    period: trimmed(20)


class ClassGroupRequest(CamelModel):
    name: trimmed(100)
    period: Optional[str] = Field(default=None, max_length=20)
    schedules: List[Schedule] = Field(default_factory=list)
    student_ids: List[str] = Field(default_factory=list)


class ClassGroupInfo(CamelModel):
    id: str
    course_id: str
    name: str
    period: Optional[str] = None
    schedules: List[Schedule] = Field(default_factory=list)
    student_ids: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ClassGroupResponse(CamelModel):
    class_group: ClassGroupInfo


class ClassGroupListResponse(CamelModel):
    class_groups: List[ClassGroupInfo]


AttendanceStatus = Literal["present", "late", "sick_leave", "approved_absence", "excused"]


class AttendanceEntry(CamelModel):
    student_id: Trimmed
    status: AttendanceStatus


class AttendanceSaveRequest(CamelModel):
    date: datetime
    attendances: List[AttendanceEntry]


class AttendanceSaveResponse(CamelModel):
    message: str
    count: int


class AttendanceInfo(CamelModel):
    id: str
    student_id: str
    status: str
    date: datetime


class AttendanceListResponse(CamelModel):
    attendances: List[AttendanceInfo]

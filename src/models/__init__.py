from .base import Base
from .user import UserModel
from .profiles import AdminProfileModel, StudentProfileModel, TeacherProfileModel
from .school import SchoolModel
from .course import CourseEnrollmentModel, CourseModel
from .class_group import ClassGroupModel
from .attendance import AttendanceModel
from .calendar_event import CalendarEventModel
from .announcement import AnnouncementModel
from .assignment import AssignmentAttachmentModel, AssignmentModel
from .evaluation_question import EvaluationQuestionModel
from .curriculum_subject import CurriculumSubjectModel

__all__ = [
    "Base",
    "UserModel",
    "AdminProfileModel",
    "StudentProfileModel",
    "TeacherProfileModel",
    "SchoolModel",
    "CourseEnrollmentModel",
    "CourseModel",
    "ClassGroupModel",
    "AttendanceModel",
    "CalendarEventModel",
    "AnnouncementModel",
    "AssignmentAttachmentModel",
    "AssignmentModel",
    "EvaluationQuestionModel",
    "CurriculumSubjectModel",
]

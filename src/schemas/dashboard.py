"""Dashboard and landing page schemas."""

from typing import Dict, List, Optional

from .announcement import AnnouncementInfo
from .base import CamelModel
from .calendar_event import CalendarEventInfo
from .course import CourseInfo
from .school import SuperadminStats
from .student_profile import StudentProfileInfo
from .user import User


class DashboardResponse(CamelModel):
    """Role-specific landing data; only the sections of the caller's role are set."""

    role: Optional[str] = None
    redirect_path: str
    user: User
    courses: Optional[List[CourseInfo]] = None
    events: Optional[List[CalendarEventInfo]] = None
    profile: Optional[StudentProfileInfo] = None
    announcements: Optional[List[AnnouncementInfo]] = None
    user_counts: Optional[Dict[str, int]] = None
    stats: Optional[SuperadminStats] = None


class ChatResponse(CamelModel):
    url: str

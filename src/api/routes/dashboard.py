"""Role-based landing data and the chat link."""

from datetime import timedelta

from fastapi import APIRouter, Depends

from api.routes.admin import build_superadmin_stats
from api.routes.auth import get_current_user
from config import CHAT_URL
from core.dependencies import (
    AnnouncementManagerDep,
    CalendarManagerDep,
    CourseManagerDep,
    SchoolManagerDep,
    StudentProfileManagerDep,
    UserManagerDep,
)
from models.base import utcnow
from models.user import UserModel
from schemas.course import CourseInfo
from schemas.dashboard import ChatResponse, DashboardResponse
from schemas.student_profile import StudentProfileInfo
from utils.converters import model_to_announcement, model_to_calendar_event, model_to_user

router = APIRouter(prefix="/api", tags=["Dashboard"])

REDIRECT_PATHS = {
    "student": "/dashboard/student",
    "teacher": "/dashboard/teacher",
    "admin": "/dashboard/admin/overview",
    "superadmin": "/dashboard/superadmin",
}
DEFAULT_REDIRECT = "/dashboard"

RECENT_ANNOUNCEMENTS = 5


@router.get("/dashboard", response_model=DashboardResponse, summary="Landing data for the caller's role")
def get_dashboard(
    course_manager: CourseManagerDep,
    calendar_manager: CalendarManagerDep,
    announcement_manager: AnnouncementManagerDep,
    profile_manager: StudentProfileManagerDep,
    school_manager: SchoolManagerDep,
    user_manager: UserManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> DashboardResponse:
    """Summarize what the caller's dashboard shows first.

    Teachers get their courses and this week's events, students their
    profile and latest announcements, admins user counts of their school
    and superadmins the platform statistics.
    """
    response = DashboardResponse(
        role=current_user.role,
        redirect_path=REDIRECT_PATHS.get(current_user.role, DEFAULT_REDIRECT),
        user=model_to_user(current_user),
    )

    if current_user.role == "teacher":
        now = utcnow()
        week_start = (now - timedelta(days=now.weekday())).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        week_end = week_start + timedelta(days=7) - timedelta(microseconds=1)
        courses = course_manager.list_courses_for_teacher(current_user.id)
        events = calendar_manager.list_events(current_user, start=week_start, end=week_end)
        response.courses = [CourseInfo.model_validate(c) for c in courses]
        response.events = [model_to_calendar_event(e) for e in events]
    elif current_user.role == "student":
        profile = profile_manager.get_profile(current_user.id)
        announcements = announcement_manager.list_announcements(current_user)
        response.profile = StudentProfileInfo.model_validate(profile) if profile else None
        response.announcements = [
            model_to_announcement(a) for a in announcements[:RECENT_ANNOUNCEMENTS]
        ]
    elif current_user.role == "admin":
        response.user_counts = {
            role: user_manager.count_by_role(role, current_user.school)
            for role in ("student", "teacher")
        }
    elif current_user.role == "superadmin":
        admin_count = len(school_manager.list_admins())
        response.stats = build_superadmin_stats(school_manager, user_manager, admin_count)

    return response


@router.get("/chat", response_model=ChatResponse, summary="Chat service link")
def get_chat_link(current_user: UserModel = Depends(get_current_user)) -> ChatResponse:
    return ChatResponse(url=CHAT_URL)

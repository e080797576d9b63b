"""Superadmin routes: admin accounts, schools and maintenance tasks."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import require_roles
from core.dependencies import CalendarManagerDep, SchoolManagerDep, UserManagerDep
from core.exceptions import DuplicateError, NotFoundError
from models.user import UserModel
from schemas.base import MessageResponse
from schemas.calendar_event import CalendarRepairResponse
from schemas.school import (
    AdminAccountData,
    AdminAccountResponse,
    AdminInfo,
    AdminProfileInfo,
    CreateAdminRequest,
    DeleteAdminRequest,
    SuperadminOverview,
    SuperadminStats,
    UpdateAdminRequest,
)
from utils.converters import model_to_school

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def build_superadmin_stats(school_manager, user_manager, admin_count: int) -> SuperadminStats:
    return SuperadminStats(
        total_admins=admin_count,
        active_schools=school_manager.count_active_schools(),
        total_teachers=user_manager.count_by_role("teacher"),
        total_students=user_manager.count_by_role("student"),
    )


def _build_admin_info(user: UserModel) -> AdminInfo:
    profile = user.admin_profile
    school = user.administered_school
    return AdminInfo(
        id=user.id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
        profile=AdminProfileInfo(phone_number=profile.phone_number, notes=profile.notes)
        if profile
        else None,
        school=model_to_school(school) if school else None,
    )


@router.post(
    "/create-admin",
    response_model=AdminAccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create admin account with school",
)
def create_admin(
    req: CreateAdminRequest,
    school_manager: SchoolManagerDep,
    current_user: UserModel = Depends(require_roles("superadmin")),
) -> AdminAccountResponse:
    """Create an admin user, its school and admin profile in one transaction.

    Raises:
        HTTPException: 400 if e-mail, account name or school name is taken.
    """
    try:
        user, school = school_manager.create_admin(req, created_by=current_user.id)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AdminAccountResponse(
        message="Admin account created.",
        data=AdminAccountData(
            user_id=user.id, email=user.email, school_id=school.id, school_name=school.name
        ),
    )


@router.put(
    "/update-admin",
    response_model=AdminAccountResponse,
    summary="Update admin account and school",
)
def update_admin(
    req: UpdateAdminRequest,
    school_manager: SchoolManagerDep,
    current_user: UserModel = Depends(require_roles("superadmin")),
) -> AdminAccountResponse:
    try:
        user, school = school_manager.update_admin(req)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AdminAccountResponse(
        message="Admin account updated.",
        data=AdminAccountData(
            user_id=user.id, email=user.email, school_id=school.id, school_name=school.name
        ),
    )


@router.delete(
    "/delete-admin",
    response_model=MessageResponse,
    summary="Delete admin account",
)
def delete_admin(
    req: DeleteAdminRequest,
    school_manager: SchoolManagerDep,
    current_user: UserModel = Depends(require_roles("superadmin")),
) -> MessageResponse:
    """Delete an admin together with its school and profile."""
    try:
        school_manager.delete_admin(req.admin_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")
    return MessageResponse(message="Admin account deleted.")


@router.get(
    "/overview",
    response_model=SuperadminOverview,
    summary="Superadmin dashboard data",
)
def superadmin_overview(
    school_manager: SchoolManagerDep,
    user_manager: UserManagerDep,
    current_user: UserModel = Depends(require_roles("superadmin")),
) -> SuperadminOverview:
    admins = school_manager.list_admins()
    schools = school_manager.list_schools()
    return SuperadminOverview(
        admins=[_build_admin_info(admin) for admin in admins],
        schools=[model_to_school(school) for school in schools],
        stats=build_superadmin_stats(school_manager, user_manager, len(admins)),
    )


@router.post(
    "/fix-calendar-events",
    response_model=CalendarRepairResponse,
    summary="Backfill missing calendar event types",
)
def fix_calendar_events(
    calendar_manager: CalendarManagerDep,
    current_user: UserModel = Depends(require_roles("admin", "superadmin")),
) -> CalendarRepairResponse:
    count, events = calendar_manager.fill_missing_event_types()
    return CalendarRepairResponse(
        message=f"Updated {count} events.",
        updated_count=count,
        affected_events=[
            {"id": event.id, "title": event.title, "eventType": event.event_type}
            for event in events
        ],
    )

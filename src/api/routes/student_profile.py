"""Routes for a student's own profile."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import require_roles
from core.dependencies import StudentProfileManagerDep
from core.exceptions import NotFoundError
from models.user import UserModel
from schemas.student_profile import (
    StudentProfileInfo,
    StudentProfileResponse,
    StudentProfileUpdateRequest,
)
from utils.converters import model_to_user

router = APIRouter(prefix="/api/student/profile", tags=["Student Profile"])


def _build_response(user: UserModel, profile) -> StudentProfileResponse:
    return StudentProfileResponse(
        user=model_to_user(user),
        profile=StudentProfileInfo.model_validate(profile) if profile else None,
    )


@router.get("", response_model=StudentProfileResponse, summary="Get own profile")
def get_profile(
    profile_manager: StudentProfileManagerDep,
    current_user: UserModel = Depends(require_roles("student")),
) -> StudentProfileResponse:
    return _build_response(current_user, profile_manager.get_profile(current_user.id))


@router.put("", response_model=StudentProfileResponse, summary="Update own profile")
def update_profile(
    req: StudentProfileUpdateRequest,
    profile_manager: StudentProfileManagerDep,
    current_user: UserModel = Depends(require_roles("student")),
) -> StudentProfileResponse:
    """Update account fields and the student profile together."""
    try:
        user = profile_manager.update_profile(current_user.id, req)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _build_response(user, user.student_profile)

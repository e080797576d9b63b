"""Class group and attendance routes nested under a teacher's course."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.routes.auth import require_roles
from core.dependencies import ClassGroupManagerDep, CourseManagerDep
from core.exceptions import NotFoundError
from models.user import UserModel
from schemas.base import MessageResponse
from schemas.course import (
    AttendanceInfo,
    AttendanceListResponse,
    AttendanceSaveRequest,
    AttendanceSaveResponse,
    ClassGroupListResponse,
    ClassGroupRequest,
    ClassGroupResponse,
)
from utils.converters import model_to_class_group

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses/{course_id}/class-groups", tags=["Class Groups"])


def _ensure_course(course_manager, course_id: str, teacher_id: str) -> None:
    try:
        course_manager.get_owned_course(course_id, teacher_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found or you do not own it",
        )


def _get_class_group(class_group_manager, class_group_id: str, course_id: str, teacher_id: str):
    try:
        return class_group_manager.get_owned_class_group(class_group_id, course_id, teacher_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class group not found")


@router.get("", response_model=ClassGroupListResponse, summary="List class groups")
def list_class_groups(
    course_id: str,
    course_manager: CourseManagerDep,
    class_group_manager: ClassGroupManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> ClassGroupListResponse:
    _ensure_course(course_manager, course_id, current_user.id)
    groups = class_group_manager.list_class_groups(course_id)
    return ClassGroupListResponse(class_groups=[model_to_class_group(g) for g in groups])


@router.post(
    "",
    response_model=ClassGroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a class group",
)
def create_class_group(
    course_id: str,
    req: ClassGroupRequest,
    course_manager: CourseManagerDep,
    class_group_manager: ClassGroupManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> ClassGroupResponse:
    _ensure_course(course_manager, course_id, current_user.id)
    group = class_group_manager.create_class_group(course_id, current_user.id, req)
    return ClassGroupResponse(class_group=model_to_class_group(group))


@router.put(
    "/{class_group_id}",
    response_model=ClassGroupResponse,
    summary="Update a class group",
)
def update_class_group(
    course_id: str,
    class_group_id: str,
    req: ClassGroupRequest,
    class_group_manager: ClassGroupManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> ClassGroupResponse:
    try:
        group = class_group_manager.update_class_group(
            class_group_id, course_id, current_user.id, req
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class group not found")
    return ClassGroupResponse(class_group=model_to_class_group(group))


@router.delete(
    "/{class_group_id}",
    response_model=MessageResponse,
    summary="Delete a class group",
)
def delete_class_group(
    course_id: str,
    class_group_id: str,
    class_group_manager: ClassGroupManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> MessageResponse:
    try:
        class_group_manager.delete_class_group(class_group_id, course_id, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class group not found")
    return MessageResponse(message="Class group deleted.")


@router.post(
    "/{class_group_id}/attendance",
    response_model=AttendanceSaveResponse,
    summary="Save attendance for a date",
)
def save_attendance(
    course_id: str,
    class_group_id: str,
    req: AttendanceSaveRequest,
    class_group_manager: ClassGroupManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> AttendanceSaveResponse:
    """Record attendance, updating any status already stored for the day."""
    group = _get_class_group(class_group_manager, class_group_id, course_id, current_user.id)
    count = class_group_manager.save_attendance(group, req.date, req.attendances, current_user.id)
    return AttendanceSaveResponse(message="Attendance saved.", count=count)


@router.get(
    "/{class_group_id}/attendance",
    response_model=AttendanceListResponse,
    summary="Get attendance for a date",
)
def get_attendance(
    course_id: str,
    class_group_id: str,
    class_group_manager: ClassGroupManagerDep,
    date: Optional[datetime] = Query(default=None),
    current_user: UserModel = Depends(require_roles("teacher")),
) -> AttendanceListResponse:
    if date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The date query parameter is required",
        )
    group = _get_class_group(class_group_manager, class_group_id, course_id, current_user.id)
    rows = class_group_manager.list_attendance(group.id, date)
    return AttendanceListResponse(attendances=[AttendanceInfo.model_validate(r) for r in rows])

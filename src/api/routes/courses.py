"""Course routes.

Teachers create and manage their courses under ``/api/classes`` and
``/api/courses/{course_id}``; students join courses with a join code.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import require_roles
from core.dependencies import CourseManagerDep
from core.exceptions import DuplicateError, NotFoundError
from models.user import UserModel
from schemas.base import MessageResponse
from schemas.course import (
    CourseInfo,
    CourseListResponse,
    CourseRequest,
    CourseResponse,
    JoinCourseRequest,
)
from utils.course_manager import JoinCodeGenerationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Courses"])

COURSE_NOT_FOUND = "Course not found or you do not own it"


@router.post(
    "/classes",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course",
)
def create_course(
    req: CourseRequest,
    course_manager: CourseManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> CourseResponse:
    try:
        course = course_manager.create_course(req, current_user)
    except JoinCodeGenerationError as e:
        logger.error("Failed to create course for %s: %s", current_user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return CourseResponse(course=CourseInfo.model_validate(course))


@router.get("/classes", response_model=CourseListResponse, summary="List own courses")
def list_courses(
    course_manager: CourseManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> CourseListResponse:
    courses = course_manager.list_courses_for_teacher(current_user.id)
    return CourseListResponse(courses=[CourseInfo.model_validate(c) for c in courses])


@router.delete(
    "/classes/{course_id}",
    response_model=MessageResponse,
    summary="Delete a course",
)
def delete_course(
    course_id: str,
    course_manager: CourseManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> MessageResponse:
    """Delete a course together with everything filed under it."""
    try:
        course_manager.delete_course(course_id, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COURSE_NOT_FOUND)
    return MessageResponse(message="Course deleted.")


@router.post("/courses/join", response_model=CourseResponse, summary="Join a course")
def join_course(
    req: JoinCourseRequest,
    course_manager: CourseManagerDep,
    current_user: UserModel = Depends(require_roles("student")),
) -> CourseResponse:
    """Enroll the signed-in student with a join code.

    Raises:
        HTTPException: 404 for an unknown code, 400 if already enrolled.
    """
    try:
        course = course_manager.join_by_code(req.join_code, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid join code")
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return CourseResponse(course=CourseInfo.model_validate(course))


@router.get(
    "/courses/enrolled",
    response_model=CourseListResponse,
    summary="List enrolled courses",
)
def list_enrolled_courses(
    course_manager: CourseManagerDep,
    current_user: UserModel = Depends(require_roles("student")),
) -> CourseListResponse:
    courses = course_manager.list_courses_for_student(current_user.id)
    return CourseListResponse(courses=[CourseInfo.model_validate(c) for c in courses])


@router.get("/courses/{course_id}", response_model=CourseResponse, summary="Get a course")
def get_course(
    course_id: str,
    course_manager: CourseManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> CourseResponse:
    try:
        course = course_manager.get_owned_course(course_id, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COURSE_NOT_FOUND)
    return CourseResponse(course=CourseInfo.model_validate(course))


@router.put("/courses/{course_id}", response_model=CourseResponse, summary="Update a course")
def update_course(
    course_id: str,
    req: CourseRequest,
    course_manager: CourseManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> CourseResponse:
    try:
        course = course_manager.update_course(course_id, current_user.id, req)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COURSE_NOT_FOUND)
    return CourseResponse(course=CourseInfo.model_validate(course))

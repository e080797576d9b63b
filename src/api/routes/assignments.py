"""Assignment routes.

Create and update take multipart forms so files can be attached.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from api.routes.auth import get_current_user, require_roles
from core.dependencies import AssignmentManagerDep, CourseManagerDep
from core.exceptions import NotFoundError, ValidationError
from models.user import UserModel
from schemas.assignment import AssignmentListResponse, AssignmentResponse
from schemas.base import MessageResponse
from utils.assignment_manager import UploadedFile
from utils.converters import model_to_assignment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses/{course_id}/assignments", tags=["Assignments"])


def _parse_due_date(raw: Optional[str]) -> Optional[datetime]:
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid due date")


def _read_uploads(*groups: Optional[List[UploadFile]]) -> List[UploadedFile]:
    uploads = []
    for group in groups:
        for upload in group or []:
            if not upload.filename:
                continue
            uploads.append(
                UploadedFile(
                    filename=upload.filename,
                    content=upload.file.read(),
                    content_type=upload.content_type,
                )
            )
    return uploads


def _ensure_course(course_manager, course_id: str, teacher_id: str) -> None:
    try:
        course_manager.get_owned_course(course_id, teacher_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found or you do not own it",
        )


@router.get("", response_model=AssignmentListResponse, summary="List assignments")
def list_assignments(
    course_id: str,
    course_manager: CourseManagerDep,
    assignment_manager: AssignmentManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> AssignmentListResponse:
    """Teachers see assignments of their own courses, other roles any course."""
    if current_user.role == "teacher":
        _ensure_course(course_manager, course_id, current_user.id)
    else:
        try:
            course_manager.get_course(course_id)
        except NotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    assignments = assignment_manager.list_assignments(course_id)
    return AssignmentListResponse(assignments=[model_to_assignment(a) for a in assignments])


@router.post(
    "",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an assignment",
)
def create_assignment(
    course_id: str,
    course_manager: CourseManagerDep,
    assignment_manager: AssignmentManagerDep,
    title: str = Form(...),
    description: Optional[str] = Form(default=None),
    due_date: Optional[str] = Form(default=None, alias="dueDate"),
    files: Optional[List[UploadFile]] = File(default=None),
    file: Optional[List[UploadFile]] = File(default=None),
    current_user: UserModel = Depends(require_roles("teacher")),
) -> AssignmentResponse:
    _ensure_course(course_manager, course_id, current_user.id)
    try:
        assignment = assignment_manager.create_assignment(
            course_id,
            current_user.id,
            title=title,
            description=description,
            due_date=_parse_due_date(due_date),
            files=_read_uploads(files, file),
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return AssignmentResponse(assignment=model_to_assignment(assignment))


@router.put(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    summary="Update an assignment",
)
def update_assignment(
    course_id: str,
    assignment_id: str,
    assignment_manager: AssignmentManagerDep,
    title: str = Form(...),
    description: Optional[str] = Form(default=None),
    due_date: Optional[str] = Form(default=None, alias="dueDate"),
    remove_file: Optional[str] = Form(default=None, alias="removeFile"),
    files: Optional[List[UploadFile]] = File(default=None),
    file: Optional[List[UploadFile]] = File(default=None),
    current_user: UserModel = Depends(require_roles("teacher")),
) -> AssignmentResponse:
    """Update an assignment; ``removeFile=true`` drops every existing file."""
    try:
        assignment = assignment_manager.update_assignment(
            assignment_id,
            course_id,
            current_user.id,
            title=title,
            description=description,
            due_date=_parse_due_date(due_date),
            files=_read_uploads(files, file),
            remove_files=(remove_file or "").lower() == "true",
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return AssignmentResponse(assignment=model_to_assignment(assignment))


@router.delete(
    "/{assignment_id}",
    response_model=MessageResponse,
    summary="Delete an assignment",
)
def delete_assignment(
    course_id: str,
    assignment_id: str,
    assignment_manager: AssignmentManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> MessageResponse:
    try:
        assignment_manager.delete_assignment(assignment_id, course_id, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return MessageResponse(message="Assignment deleted.")


@router.delete(
    "/{assignment_id}/attachments/{attachment_id}",
    response_model=MessageResponse,
    summary="Delete an attachment",
)
def delete_attachment(
    course_id: str,
    assignment_id: str,
    attachment_id: str,
    assignment_manager: AssignmentManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> MessageResponse:
    try:
        assignment_manager.delete_attachment(
            attachment_id, assignment_id, course_id, current_user.id
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="Attachment deleted.")

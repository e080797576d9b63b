"""Assignment and attachment utilities."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from models.assignment import AssignmentAttachmentModel, AssignmentModel
from utils.converters import to_naive_utc
from utils.file_storage import remove_stored_file, save_assignment_file, validate_upload

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 5000


@dataclass
class UploadedFile:
    """An upload already read into memory."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


def _validate_fields(title: str, description: Optional[str]) -> None:
    if not title or not title.strip():
        raise ValidationError("Title is required")
    if len(title.strip()) > MAX_TITLE_LENGTH:
        raise ValidationError("Title must be at most 200 characters")
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError("Description must be at most 5000 characters")


class AssignmentManager:
    """Manages assignments of a course and their stored files."""

    def __init__(self, db: Session):
        self.db = db

    def list_assignments(self, course_id: str) -> List[AssignmentModel]:
        return (
            self.db.query(AssignmentModel)
            .filter(AssignmentModel.course_id == course_id)
            .order_by(AssignmentModel.created_at.desc())
            .all()
        )

    def get_owned_assignment(
        self, assignment_id: str, course_id: str, teacher_id: str
    ) -> AssignmentModel:
        model = (
            self.db.query(AssignmentModel)
            .filter(
                AssignmentModel.id == assignment_id,
                AssignmentModel.course_id == course_id,
                AssignmentModel.teacher_id == teacher_id,
            )
            .first()
        )
        if model is None:
            raise NotFoundError("Assignment", assignment_id)
        return model

    def _attach(self, assignment: AssignmentModel, files: List[UploadedFile]) -> List[str]:
        for upload in files:
            validate_upload(upload.filename, len(upload.content))
        stored = []
        for upload in files:
            relative, _ = save_assignment_file(upload.filename, upload.content)
            stored.append(relative)
            assignment.attachments.append(
                AssignmentAttachmentModel(
                    file_path=relative,
                    original_file_name=upload.filename,
                    file_size=len(upload.content),
                    mime_type=upload.content_type,
                )
            )
        return stored

    def _commit_or_discard(self, stored_files: List[str]) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            for path in stored_files:
                remove_stored_file(path)
            raise

    def create_assignment(
        self,
        course_id: str,
        teacher_id: str,
        title: str,
        description: Optional[str],
        due_date: Optional[datetime],
        files: List[UploadedFile],
    ) -> AssignmentModel:
        """Create an assignment and store its files.

        Raises:
            ValidationError: If a field or file is not acceptable.
        """
        _validate_fields(title, description)
        model = AssignmentModel(
            course_id=course_id,
            teacher_id=teacher_id,
            title=title.strip(),
            description=description or None,
            due_date=to_naive_utc(due_date),
        )
        self.db.add(model)
        stored = self._attach(model, files)
        self._commit_or_discard(stored)
        self.db.refresh(model)
        logger.info("Created assignment %s with %d files", model.id, len(stored))
        return model

    def update_assignment(
        self,
        assignment_id: str,
        course_id: str,
        teacher_id: str,
        title: str,
        description: Optional[str],
        due_date: Optional[datetime],
        files: List[UploadedFile],
        remove_files: bool = False,
    ) -> AssignmentModel:
        """Update fields, optionally dropping existing files and adding new ones."""
        _validate_fields(title, description)
        model = self.get_owned_assignment(assignment_id, course_id, teacher_id)
        for upload in files:
            validate_upload(upload.filename, len(upload.content))

        removed = []
        if remove_files:
            removed = [a.file_path for a in model.attachments]
            model.attachments.clear()

        model.title = title.strip()
        model.description = description or None
        model.due_date = to_naive_utc(due_date)
        stored = self._attach(model, files)
        self._commit_or_discard(stored)
        for path in removed:
            remove_stored_file(path)
        self.db.refresh(model)
        return model

    def delete_assignment(self, assignment_id: str, course_id: str, teacher_id: str) -> None:
        model = self.get_owned_assignment(assignment_id, course_id, teacher_id)
        paths = [a.file_path for a in model.attachments]
        self.db.delete(model)
        self.db.commit()
        for path in paths:
            remove_stored_file(path)
        logger.info("Deleted assignment: %s", assignment_id)

    def delete_attachment(
        self, attachment_id: str, assignment_id: str, course_id: str, teacher_id: str
    ) -> None:
        """Remove one attachment.

        The row is deleted even when the file cannot be removed from disk.
        """
        assignment = self.get_owned_assignment(assignment_id, course_id, teacher_id)
        attachment = next((a for a in assignment.attachments if a.id == attachment_id), None)
        if attachment is None:
            raise NotFoundError("Attachment", attachment_id)
        remove_stored_file(attachment.file_path)
        assignment.attachments.remove(attachment)
        self.db.commit()
        logger.info("Deleted attachment %s of assignment %s", attachment_id, assignment_id)

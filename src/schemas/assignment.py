"""Assignment schemas (request bodies arrive as multipart forms)."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class AttachmentInfo(CamelModel):
    id: str
    file_path: str
    original_file_name: str
    file_size: int
    mime_type: Optional[str] = None
    created_at: datetime


class AssignmentInfo(CamelModel):
    id: str
    course_id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    attachments: List[AttachmentInfo] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class AssignmentResponse(CamelModel):
    assignment: AssignmentInfo


class AssignmentListResponse(CamelModel):
    assignments: List[AssignmentInfo]

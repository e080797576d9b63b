"""Announcement schemas."""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import StringConstraints, model_validator

from .base import CamelModel

Audience = Literal["all", "grade-1", "grade-2", "grade-3", "parents", "teachers"]


class AnnouncementRequest(CamelModel):
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]
    audience: Audience
    author: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]] = None
    is_scheduled: bool = False
    publish_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _schedule_needs_time(self) -> "AnnouncementRequest":
        if self.is_scheduled and self.publish_at is None:
            raise ValueError("publishAt is required for scheduled announcements")
        return self


class AnnouncementInfo(CamelModel):
    id: str
    title: str
    content: str
    audience: str
    author: str
    author_id: str
    is_scheduled: bool
    publish_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    school: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AnnouncementResponse(CamelModel):
    announcement: AnnouncementInfo


class AnnouncementListResponse(CamelModel):
    announcements: List[AnnouncementInfo]

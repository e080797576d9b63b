"""Announcement utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from models.announcement import AnnouncementModel
from models.base import utcnow
from models.user import UserModel
from schemas.announcement import AnnouncementRequest
from utils.converters import to_naive_utc

logger = logging.getLogger(__name__)

MAX_ANNOUNCEMENTS = 50


def _sort_key(model: AnnouncementModel):
    return model.published_at or model.publish_at or model.created_at


class AnnouncementManager:
    """Manages announcements scoped to the author's school."""

    def __init__(self, db: Session):
        self.db = db

    def _apply(self, model: AnnouncementModel, req: AnnouncementRequest, author: str) -> None:
        publish_at = to_naive_utc(req.publish_at)
        if publish_at is not None and publish_at <= utcnow():
            raise ValidationError("publishAt must be in the future")

        model.title = req.title
        model.content = req.content
        model.audience = req.audience
        model.author = req.author or author
        model.is_scheduled = req.is_scheduled
        model.publish_at = publish_at
        if req.is_scheduled:
            model.published_at = None
        elif model.published_at is None:
            model.published_at = utcnow()

    def create_announcement(self, user: UserModel, req: AnnouncementRequest) -> AnnouncementModel:
        """Publish now, or schedule for ``publish_at``.

        Raises:
            ValidationError: If ``publish_at`` is not in the future.
        """
        model = AnnouncementModel(author_id=user.id, school=user.school)
        self._apply(model, req, user.name or user.email)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created announcement %s for %s", model.id, model.audience)
        return model

    def list_announcements(
        self,
        user: UserModel,
        audience: Optional[str] = None,
        include_scheduled: bool = False,
    ) -> List[AnnouncementModel]:
        """Announcements visible to ``user``, newest first.

        Students only ever see announcements addressed to everyone. For other
        roles an ``audience`` filter keeps "all" announcements as well.
        """
        query = self.db.query(AnnouncementModel)
        if not include_scheduled:
            query = query.filter(AnnouncementModel.published_at.isnot(None))
        if user.school:
            query = query.filter(AnnouncementModel.school == user.school)

        if user.role == "student":
            query = query.filter(AnnouncementModel.audience == "all")
        elif audience:
            query = query.filter(AnnouncementModel.audience.in_(["all", audience]))

        models = (
            query.order_by(AnnouncementModel.created_at.desc())
            .limit(MAX_ANNOUNCEMENTS)
            .all()
        )
        return sorted(models, key=_sort_key, reverse=True)

    def get_announcement(self, announcement_id: str, user: UserModel) -> AnnouncementModel:
        """Fetch one announcement.

        Raises:
            NotFoundError: If it does not exist.
            PermissionDeniedError: If it belongs to another school.
        """
        model = (
            self.db.query(AnnouncementModel)
            .filter(AnnouncementModel.id == announcement_id)
            .first()
        )
        if model is None:
            raise NotFoundError("Announcement", announcement_id)
        if user.school and model.school != user.school:
            raise PermissionDeniedError("Announcement belongs to another school")
        return model

    def _get_authored(self, announcement_id: str, user: UserModel) -> AnnouncementModel:
        model = self.get_announcement(announcement_id, user)
        if model.author_id != user.id:
            raise PermissionDeniedError("Only the author can modify this announcement")
        return model

    def update_announcement(
        self, announcement_id: str, user: UserModel, req: AnnouncementRequest
    ) -> AnnouncementModel:
        model = self._get_authored(announcement_id, user)
        self._apply(model, req, model.author)
        self.db.commit()
        self.db.refresh(model)
        return model

    def delete_announcement(self, announcement_id: str, user: UserModel) -> None:
        model = self._get_authored(announcement_id, user)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted announcement: %s", announcement_id)

"""Calendar event utilities."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from config import DEFAULT_EVENT_TYPE
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from models.calendar_event import CalendarEventModel
from models.user import UserModel
from schemas.calendar_event import CalendarEventCreateRequest, CalendarEventUpdateRequest
from utils.converters import to_naive_utc

logger = logging.getLogger(__name__)


class CalendarManager:
    """Manages school-wide, personal and class calendar events."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _school_filter(school: Optional[str]):
        if school is None:
            return and_(CalendarEventModel.scope == "school", CalendarEventModel.school.is_(None))
        return and_(CalendarEventModel.scope == "school", CalendarEventModel.school == school)

    def list_events(
        self,
        user: UserModel,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        scope: Optional[str] = None,
    ) -> List[CalendarEventModel]:
        """List events visible to ``user``.

        Args:
            user: Signed-in user.
            start: Range start, applied together with ``end``.
            end: Range end, inclusive.
            scope: "school", "personal" or anything else for both. Only
                teachers have personal events.
        """
        query = self.db.query(CalendarEventModel)
        if start is not None and end is not None:
            query = query.filter(
                CalendarEventModel.start_date >= to_naive_utc(start),
                CalendarEventModel.start_date <= to_naive_utc(end),
            )

        personal = and_(
            CalendarEventModel.scope == "personal",
            CalendarEventModel.teacher_id == user.id,
        )
        if scope == "school":
            query = query.filter(self._school_filter(user.school))
        elif scope == "personal":
            query = query.filter(personal)
        elif user.role == "teacher":
            query = query.filter(or_(self._school_filter(user.school), personal))
        else:
            query = query.filter(self._school_filter(user.school))

        return query.order_by(CalendarEventModel.start_date.asc()).all()

    def create_event(
        self, user: UserModel, req: CalendarEventCreateRequest
    ) -> CalendarEventModel:
        """Create an event on behalf of a teacher.

        Raises:
            ValidationError: If a school event is created by a user without a school.
        """
        school = None
        teacher_id = None
        if req.scope == "personal":
            teacher_id = user.id
        elif req.scope == "school":
            if not user.school:
                raise ValidationError("A school is required to create school events")
            school = user.school
        else:
            school = user.school
            teacher_id = user.id

        event = CalendarEventModel(
            title=req.title,
            description=req.description,
            start_date=to_naive_utc(req.start_date),
            end_date=to_naive_utc(req.end_date),
            event_type=req.event_type or DEFAULT_EVENT_TYPE,
            scope=req.scope,
            school=school,
            teacher_id=teacher_id,
            course_id=req.course_id,
            department=req.department,
            responsible_person=req.responsible_person,
            schedule_area=req.schedule_area,
            grade_levels=list(req.grade_levels),
            periods=list(req.periods),
            created_by=user.id,
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        logger.info("Created %s event %s by %s", event.scope, event.id, user.id)
        return event

    def _get_editable(self, event_id: str, user_id: str) -> CalendarEventModel:
        event = self.db.query(CalendarEventModel).filter(CalendarEventModel.id == event_id).first()
        if event is None:
            raise NotFoundError("Event", event_id)
        if (
            event.created_by != user_id
            and event.scope == "personal"
            and event.teacher_id != user_id
        ):
            raise PermissionDeniedError("Not allowed to modify this event")
        return event

    def update_event(
        self, event_id: str, user_id: str, req: CalendarEventUpdateRequest
    ) -> CalendarEventModel:
        """Apply the fields present in ``req``.

        Raises:
            NotFoundError: If the event does not exist.
            PermissionDeniedError: If it is someone else's personal event.
            ValidationError: If the resulting end precedes the start.
        """
        event = self._get_editable(event_id, user_id)
        data = req.model_dump(exclude_unset=True)
        for key in ("start_date", "end_date"):
            if key in data:
                data[key] = to_naive_utc(data[key])
        for key, value in data.items():
            if key in ("title", "start_date", "event_type") and value is None:
                continue
            if key in ("grade_levels", "periods") and value is None:
                value = []
            setattr(event, key, value)

        if event.end_date is not None and event.end_date < event.start_date:
            self.db.rollback()
            raise ValidationError("endDate must not be before startDate")
        self.db.commit()
        self.db.refresh(event)
        return event

    def delete_event(self, event_id: str, user_id: str) -> None:
        event = self._get_editable(event_id, user_id)
        self.db.delete(event)
        self.db.commit()
        logger.info("Deleted event: %s", event_id)

    def fill_missing_event_types(self) -> Tuple[int, List[CalendarEventModel]]:
        """Backfill events without a category with the default category.

        Returns:
            Number of events updated and the events themselves.
        """
        events = (
            self.db.query(CalendarEventModel)
            .filter(CalendarEventModel.event_type.is_(None))
            .all()
        )
        for event in events:
            event.event_type = DEFAULT_EVENT_TYPE
        self.db.commit()
        logger.info("Filled event type on %d events", len(events))
        return len(events), events


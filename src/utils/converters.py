"""Conversions between ORM models and API schemas.

Several columns hold JSON-encoded text; the helpers here decode them
leniently so a corrupt value never breaks a listing.
"""

import json
import logging
from datetime import datetime
from typing import Any, List, Optional

import pytz

from models.announcement import AnnouncementModel
from models.assignment import AssignmentModel
from models.calendar_event import CalendarEventModel
from models.class_group import ClassGroupModel
from models.evaluation_question import EvaluationQuestionModel
from models.school import SchoolModel
from models.user import UserModel
from schemas.announcement import AnnouncementInfo
from schemas.assignment import AssignmentInfo
from schemas.calendar_event import CalendarEventInfo
from schemas.course import ClassGroupInfo
from schemas.evaluation_question import EvaluationQuestionInfo
from schemas.school import SchoolInfo
from schemas.user import User

logger = logging.getLogger(__name__)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware or naive datetime to naive UTC for storage."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def load_json_list(raw: Optional[str], field: str = "value") -> List[Any]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Could not decode JSON %s: %r", field, raw[:100])
        return []
    return value if isinstance(value, list) else []


def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def model_to_user(model: UserModel) -> User:
    return User.model_validate(model)


def model_to_school(model: SchoolModel) -> SchoolInfo:
    return SchoolInfo(
        id=model.id,
        name=model.name,
        school_type=model.school_type,
        admin_user_id=model.admin_user_id,
        contact_name=model.contact_name,
        contact_phone=model.contact_phone,
        grade_info=load_json_list(model.grade_info, "grade_info"),
        total_classes=model.total_classes,
        total_students=model.total_students,
        status=model.status,
        notes=model.notes,
        created_at=model.created_at,
    )


def model_to_class_group(model: ClassGroupModel) -> ClassGroupInfo:
    return ClassGroupInfo(
        id=model.id,
        course_id=model.course_id,
        name=model.name,
        period=model.period,
        schedules=load_json_list(model.schedules, "schedules"),
        student_ids=list(model.student_ids or []),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_evaluation_question(model: EvaluationQuestionModel) -> EvaluationQuestionInfo:
    return EvaluationQuestionInfo(
        id=model.id,
        course_id=model.course_id,
        unit=model.unit,
        question_number=model.question_number,
        questions=load_json_list(model.questions, "questions"),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_assignment(model: AssignmentModel) -> AssignmentInfo:
    return AssignmentInfo.model_validate(model)


def model_to_announcement(model: AnnouncementModel) -> AnnouncementInfo:
    return AnnouncementInfo.model_validate(model)


def model_to_calendar_event(model: CalendarEventModel) -> CalendarEventInfo:
    """Convert an event into the start/end/allDay/extendedProps shape."""
    end = model.end_date
    all_day = end is None or model.start_date.date() == end.date()
    return CalendarEventInfo(
        id=model.id,
        title=model.title,
        description=model.description,
        start=model.start_date,
        end=end,
        all_day=all_day,
        extended_props={
            "eventType": model.event_type,
            "scope": model.scope,
            "school": model.school,
            "courseId": model.course_id,
            "department": model.department,
            "responsiblePerson": model.responsible_person,
            "scheduleArea": model.schedule_area,
            "gradeLevels": list(model.grade_levels or []),
            "periods": list(model.periods or []),
            "createdBy": model.created_by,
        },
    )

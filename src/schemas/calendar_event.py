"""Calendar event schemas."""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import Field, StringConstraints, model_validator

from .base import CamelModel

EventScope = Literal["school", "personal", "class"]
EventType = Literal["자율*자치", "동아리", "진로", "봉사", "평가", "행사", "휴업일", "개인일정", "기타"]
ScheduleArea = Literal["창의적 체험활동", "교과"]
GradeLevel = Literal["1", "2", "3"]
Period = Literal["1", "2", "3", "4", "5", "6", "7", "8", "9"]

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


def _short(max_length: int):
    return Annotated[str, StringConstraints(strip_whitespace=True, max_length=max_length)]


class CalendarEventCreateRequest(CamelModel):
    title: Title
    description: Optional[_short(1000)] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    event_type: Optional[EventType] = None
    scope: EventScope
    course_id: Optional[str] = None
    department: Optional[_short(100)] = None
    responsible_person: Optional[_short(100)] = None
    schedule_area: Optional[ScheduleArea] = None
    grade_levels: List[GradeLevel] = Field(default_factory=list)
    periods: List[Period] = Field(default_factory=list)

    @model_validator(mode="after")
    def _end_after_start(self) -> "CalendarEventCreateRequest":
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class CalendarEventUpdateRequest(CamelModel):
    title: Optional[Title] = None
    description: Optional[_short(1000)] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    event_type: Optional[EventType] = None
    department: Optional[_short(100)] = None
    responsible_person: Optional[_short(100)] = None
    schedule_area: Optional[ScheduleArea] = None
    grade_levels: Optional[List[GradeLevel]] = None
    periods: Optional[List[Period]] = None


class CalendarEventInfo(CamelModel):
    """Event in the shape calendar widgets consume."""

    id: str
    title: str
    description: Optional[str] = None
    start: datetime
    end: Optional[datetime] = None
    all_day: bool
    extended_props: Dict[str, Any]


class CalendarEventListResponse(CamelModel):
    events: List[CalendarEventInfo]


class CalendarEventResponse(CamelModel):
    event: CalendarEventInfo


class CalendarRepairResponse(CamelModel):
    message: str
    updated_count: int
    affected_events: List[Dict[str, Any]]

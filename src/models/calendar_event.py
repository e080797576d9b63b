from sqlalchemy import JSON, Column, DateTime, String, Text

from .base import Base, new_id, utcnow


class CalendarEventModel(Base):
    __tablename__ = "calendar_events"

    id = Column(String, primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime, index=True, nullable=False)
    end_date = Column(DateTime, nullable=True)
    event_type = Column(String, nullable=True)
    # 'school', 'personal' or 'class'
    scope = Column(String, index=True, nullable=False, default="school")
    school = Column(String, index=True, nullable=True)
    teacher_id = Column(String, index=True, nullable=True)
    course_id = Column(String, nullable=True)
    department = Column(String, nullable=True)
    responsible_person = Column(String, nullable=True)
    schedule_area = Column(String, nullable=True)
    grade_levels = Column(JSON, nullable=False, default=list)
    periods = Column(JSON, nullable=False, default=list)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

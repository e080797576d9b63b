from sqlalchemy import Boolean, Column, DateTime, String, Text

from .base import Base, new_id, utcnow


class AnnouncementModel(Base):
    __tablename__ = "announcements"

    id = Column(String, primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    # 'all', 'grade-1', 'grade-2', 'grade-3', 'parents' or 'teachers'
    audience = Column(String, index=True, nullable=False)
    author = Column(String, nullable=False)
    author_id = Column(String, index=True, nullable=False)
    is_scheduled = Column(Boolean, nullable=False, default=False)
    publish_at = Column(DateTime, nullable=True)
    published_at = Column(DateTime, nullable=True)
    school = Column(String, index=True, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

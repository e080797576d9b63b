from sqlalchemy import Column, Integer, String

from .base import Base


class CurriculumSubjectModel(Base):
    """Curriculum catalog row used for subject lookups."""

    __tablename__ = "curriculum_subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    career_track = Column(String, nullable=True)
    subject_group = Column(String, nullable=True)
    subject_area = Column(String, nullable=True)

from typing import List, Optional

from .base import CamelModel


class SubjectListResponse(CamelModel):
    subjects: List[str]


class SubjectDetail(CamelModel):
    name: str
    career_track: Optional[str] = None
    subject_group: Optional[str] = None
    subject_area: Optional[str] = None

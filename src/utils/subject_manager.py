"""Curriculum subject lookups."""

from typing import List

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from models.curriculum_subject import CurriculumSubjectModel


class SubjectManager:
    def __init__(self, db: Session):
        self.db = db

    def list_subject_names(self) -> List[str]:
        rows = (
            self.db.query(CurriculumSubjectModel.name)
            .distinct()
            .order_by(CurriculumSubjectModel.name)
            .all()
        )
        return [row[0] for row in rows if row[0]]

    def get_subject(self, name: str) -> CurriculumSubjectModel:
        model = (
            self.db.query(CurriculumSubjectModel)
            .filter(CurriculumSubjectModel.name == name)
            .first()
        )
        if model is None:
            raise NotFoundError("Subject", name)
        return model

"""Evaluation question utilities."""

import logging
from typing import List

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from models.evaluation_question import EvaluationQuestionModel
from schemas.evaluation_question import EvaluationQuestionRequest
from utils.converters import dump_json

logger = logging.getLogger(__name__)


def _encode_questions(req: EvaluationQuestionRequest) -> str:
    return dump_json([q.model_dump(by_alias=True, exclude_none=True) for q in req.questions])


class EvaluationManager:
    """Manages evaluation question sets of a course."""

    def __init__(self, db: Session):
        self.db = db

    def list_questions(self, course_id: str, teacher_id: str) -> List[EvaluationQuestionModel]:
        return (
            self.db.query(EvaluationQuestionModel)
            .filter(
                EvaluationQuestionModel.course_id == course_id,
                EvaluationQuestionModel.teacher_id == teacher_id,
            )
            .order_by(EvaluationQuestionModel.created_at.desc())
            .all()
        )

    def get_owned(
        self, question_id: str, course_id: str, teacher_id: str
    ) -> EvaluationQuestionModel:
        model = (
            self.db.query(EvaluationQuestionModel)
            .filter(
                EvaluationQuestionModel.id == question_id,
                EvaluationQuestionModel.course_id == course_id,
                EvaluationQuestionModel.teacher_id == teacher_id,
            )
            .first()
        )
        if model is None:
            raise NotFoundError("Evaluation question", question_id)
        return model

    def create(
        self, course_id: str, teacher_id: str, req: EvaluationQuestionRequest
    ) -> EvaluationQuestionModel:
        model = EvaluationQuestionModel(
            course_id=course_id,
            teacher_id=teacher_id,
            unit=req.unit,
            question_number=req.question_number,
            questions=_encode_questions(req),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created evaluation question %s in course %s", model.id, course_id)
        return model

    def update(
        self, question_id: str, course_id: str, teacher_id: str, req: EvaluationQuestionRequest
    ) -> EvaluationQuestionModel:
        model = self.get_owned(question_id, course_id, teacher_id)
        model.unit = req.unit
        model.question_number = req.question_number
        model.questions = _encode_questions(req)
        self.db.commit()
        self.db.refresh(model)
        return model

    def delete(self, question_id: str, course_id: str, teacher_id: str) -> None:
        model = self.get_owned(question_id, course_id, teacher_id)
        self.db.delete(model)
        self.db.commit()

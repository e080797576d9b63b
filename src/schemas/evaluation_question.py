"""Evaluation question schemas."""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import Field, StringConstraints

from .base import CamelModel

QuestionType = Literal["객관식", "서술형"]


def _trimmed(max_length: Optional[int] = None):
    return Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=max_length)
    ]


class QuestionOption(CamelModel):
    text: _trimmed()


class QuestionItem(CamelModel):
    question_type: QuestionType
    question_text: _trimmed(2000)
    points: float = Field(..., ge=1, le=100)
    options: Optional[List[QuestionOption]] = None
    correct_answer: Optional[int] = None
    model_answer: Optional[str] = None


class EvaluationQuestionRequest(CamelModel):
    unit: _trimmed(100)
    question_number: _trimmed(50)
    questions: List[QuestionItem] = Field(..., min_length=1)


class EvaluationQuestionInfo(CamelModel):
    id: str
    course_id: str
    unit: str
    question_number: str
    questions: List[QuestionItem] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class EvaluationQuestionResponse(CamelModel):
    evaluation_question: EvaluationQuestionInfo


class EvaluationQuestionListResponse(CamelModel):
    evaluation_questions: List[EvaluationQuestionInfo]

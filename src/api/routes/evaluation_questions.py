"""Evaluation question routes nested under a teacher's course."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import require_roles
from core.dependencies import CourseManagerDep, EvaluationManagerDep
from core.exceptions import NotFoundError
from models.user import UserModel
from schemas.base import MessageResponse
from schemas.evaluation_question import (
    EvaluationQuestionListResponse,
    EvaluationQuestionRequest,
    EvaluationQuestionResponse,
)
from utils.converters import model_to_evaluation_question

router = APIRouter(
    prefix="/api/courses/{course_id}/evaluation-questions",
    tags=["Evaluation Questions"],
)

QUESTION_NOT_FOUND = "Evaluation question not found"


def _ensure_course(course_manager, course_id: str, teacher_id: str) -> None:
    try:
        course_manager.get_owned_course(course_id, teacher_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found or you do not own it",
        )


@router.get("", response_model=EvaluationQuestionListResponse, summary="List question sets")
def list_evaluation_questions(
    course_id: str,
    course_manager: CourseManagerDep,
    evaluation_manager: EvaluationManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> EvaluationQuestionListResponse:
    _ensure_course(course_manager, course_id, current_user.id)
    models = evaluation_manager.list_questions(course_id, current_user.id)
    return EvaluationQuestionListResponse(
        evaluation_questions=[model_to_evaluation_question(m) for m in models]
    )


@router.post(
    "",
    response_model=EvaluationQuestionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a question set",
)
def create_evaluation_question(
    course_id: str,
    req: EvaluationQuestionRequest,
    course_manager: CourseManagerDep,
    evaluation_manager: EvaluationManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> EvaluationQuestionResponse:
    _ensure_course(course_manager, course_id, current_user.id)
    model = evaluation_manager.create(course_id, current_user.id, req)
    return EvaluationQuestionResponse(evaluation_question=model_to_evaluation_question(model))


@router.get(
    "/{question_id}",
    response_model=EvaluationQuestionResponse,
    summary="Get a question set",
)
def get_evaluation_question(
    course_id: str,
    question_id: str,
    evaluation_manager: EvaluationManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> EvaluationQuestionResponse:
    try:
        model = evaluation_manager.get_owned(question_id, course_id, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=QUESTION_NOT_FOUND)
    return EvaluationQuestionResponse(evaluation_question=model_to_evaluation_question(model))


@router.put(
    "/{question_id}",
    response_model=EvaluationQuestionResponse,
    summary="Update a question set",
)
def update_evaluation_question(
    course_id: str,
    question_id: str,
    req: EvaluationQuestionRequest,
    evaluation_manager: EvaluationManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> EvaluationQuestionResponse:
    try:
        model = evaluation_manager.update(question_id, course_id, current_user.id, req)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=QUESTION_NOT_FOUND)
    return EvaluationQuestionResponse(evaluation_question=model_to_evaluation_question(model))


@router.delete(
    "/{question_id}",
    response_model=MessageResponse,
    summary="Delete a question set",
)
def delete_evaluation_question(
    course_id: str,
    question_id: str,
    evaluation_manager: EvaluationManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> MessageResponse:
    try:
        evaluation_manager.delete(question_id, course_id, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=QUESTION_NOT_FOUND)
    return MessageResponse(message="Evaluation question deleted.")

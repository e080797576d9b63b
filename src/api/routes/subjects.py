"""Curriculum subject lookup routes."""

from fastapi import APIRouter, HTTPException, status

from core.dependencies import SubjectManagerDep
from core.exceptions import NotFoundError
from schemas.subject import SubjectDetail, SubjectListResponse

router = APIRouter(prefix="/api/subjects", tags=["Subjects"])


@router.get("", response_model=SubjectListResponse, summary="List subject names")
def list_subjects(subject_manager: SubjectManagerDep) -> SubjectListResponse:
    return SubjectListResponse(subjects=subject_manager.list_subject_names())


@router.get("/{subject_name}", response_model=SubjectDetail, summary="Get a subject")
def get_subject(subject_name: str, subject_manager: SubjectManagerDep) -> SubjectDetail:
    try:
        model = subject_manager.get_subject(subject_name)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    return SubjectDetail(
        name=model.name,
        career_track=model.career_track,
        subject_group=model.subject_group,
        subject_area=model.subject_area,
    )

"""Announcement routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.routes.auth import get_current_user, require_roles
from core.dependencies import AnnouncementManagerDep
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from models.user import UserModel
from schemas.announcement import (
    AnnouncementListResponse,
    AnnouncementRequest,
    AnnouncementResponse,
    Audience,
)
from schemas.base import MessageResponse
from utils.converters import model_to_announcement

router = APIRouter(prefix="/api/announcements", tags=["Announcements"])


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    if isinstance(e, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an announcement",
)
def create_announcement(
    req: AnnouncementRequest,
    announcement_manager: AnnouncementManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> AnnouncementResponse:
    try:
        model = announcement_manager.create_announcement(current_user, req)
    except ValidationError as e:
        raise _http_error(e)
    return AnnouncementResponse(announcement=model_to_announcement(model))


@router.get("", response_model=AnnouncementListResponse, summary="List announcements")
def list_announcements(
    announcement_manager: AnnouncementManagerDep,
    audience: Optional[Audience] = Query(default=None),
    include_scheduled: bool = Query(default=False, alias="includeScheduled"),
    current_user: UserModel = Depends(get_current_user),
) -> AnnouncementListResponse:
    models = announcement_manager.list_announcements(
        current_user, audience=audience, include_scheduled=include_scheduled
    )
    return AnnouncementListResponse(announcements=[model_to_announcement(m) for m in models])


@router.get(
    "/{announcement_id}",
    response_model=AnnouncementResponse,
    summary="Get an announcement",
)
def get_announcement(
    announcement_id: str,
    announcement_manager: AnnouncementManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> AnnouncementResponse:
    try:
        model = announcement_manager.get_announcement(announcement_id, current_user)
    except (NotFoundError, PermissionDeniedError) as e:
        raise _http_error(e)
    return AnnouncementResponse(announcement=model_to_announcement(model))


@router.put(
    "/{announcement_id}",
    response_model=AnnouncementResponse,
    summary="Update an announcement",
)
def update_announcement(
    announcement_id: str,
    req: AnnouncementRequest,
    announcement_manager: AnnouncementManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> AnnouncementResponse:
    try:
        model = announcement_manager.update_announcement(announcement_id, current_user, req)
    except (NotFoundError, PermissionDeniedError, ValidationError) as e:
        raise _http_error(e)
    return AnnouncementResponse(announcement=model_to_announcement(model))


@router.delete(
    "/{announcement_id}",
    response_model=MessageResponse,
    summary="Delete an announcement",
)
def delete_announcement(
    announcement_id: str,
    announcement_manager: AnnouncementManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> MessageResponse:
    try:
        announcement_manager.delete_announcement(announcement_id, current_user)
    except (NotFoundError, PermissionDeniedError) as e:
        raise _http_error(e)
    return MessageResponse(message="Announcement deleted.")

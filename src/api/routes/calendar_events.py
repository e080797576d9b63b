"""Calendar event routes."""

from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.routes.auth import get_current_user, require_roles
from core.dependencies import CalendarManagerDep
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from models.user import UserModel
from schemas.base import MessageResponse
from schemas.calendar_event import (
    CalendarEventCreateRequest,
    CalendarEventListResponse,
    CalendarEventResponse,
    CalendarEventUpdateRequest,
)
from utils.converters import model_to_calendar_event

router = APIRouter(prefix="/api/calendar-events", tags=["Calendar"])


@router.get("", response_model=CalendarEventListResponse, summary="List calendar events")
def list_events(
    calendar_manager: CalendarManagerDep,
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    scope: Optional[Literal["school", "personal", "all"]] = Query(default=None),
    current_user: UserModel = Depends(get_current_user),
) -> CalendarEventListResponse:
    """School events of the caller's school, plus own personal events for teachers."""
    events = calendar_manager.list_events(current_user, start=start, end=end, scope=scope)
    return CalendarEventListResponse(events=[model_to_calendar_event(e) for e in events])


@router.post(
    "",
    response_model=CalendarEventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a calendar event",
)
def create_event(
    req: CalendarEventCreateRequest,
    calendar_manager: CalendarManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> CalendarEventResponse:
    try:
        event = calendar_manager.create_event(current_user, req)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return CalendarEventResponse(event=model_to_calendar_event(event))


@router.patch(
    "/{event_id}",
    response_model=CalendarEventResponse,
    summary="Update a calendar event",
)
def update_event(
    event_id: str,
    req: CalendarEventUpdateRequest,
    calendar_manager: CalendarManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> CalendarEventResponse:
    try:
        event = calendar_manager.update_event(event_id, current_user.id, req)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return CalendarEventResponse(event=model_to_calendar_event(event))


@router.delete("/{event_id}", response_model=MessageResponse, summary="Delete a calendar event")
def delete_event(
    event_id: str,
    calendar_manager: CalendarManagerDep,
    current_user: UserModel = Depends(require_roles("teacher")),
) -> MessageResponse:
    try:
        calendar_manager.delete_event(event_id, current_user.id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return MessageResponse(message="Event deleted.")

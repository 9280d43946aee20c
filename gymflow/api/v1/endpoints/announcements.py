"""
Announcements Module - API Endpoints

Gyms post announcements to their member roster. Every committed change is
also pushed to the members connected to ``/ws/announcements`` (best-effort,
at most once per session, after the response is sent).
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from gymflow.api.deps import get_announcement_service
from gymflow.core.auth import Principal, get_current_principal, require_role
from gymflow.db.session import get_db
from gymflow.models.user import UserRole
from gymflow.schemas.announcement import Announcement, AnnouncementCreate, AnnouncementUpdate
from gymflow.services.announcement import AnnouncementService

router = APIRouter()


@router.post("/", response_model=Announcement, status_code=201)
def create_announcement(
    announcement_in: AnnouncementCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
    service: AnnouncementService = Depends(get_announcement_service),
) -> Any:
    """
    Post an announcement and broadcast it as an ``announcement`` event.

    Raises:
        400 ValidationError: empty message
    """
    return service.post(db, principal, announcement_in)


@router.get("/", response_model=List[Announcement])
def read_announcements(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: AnnouncementService = Depends(get_announcement_service),
) -> Any:
    """Announcement history of the caller's gym, newest first."""
    return service.list_for_principal(db, principal, skip=skip, limit=limit)


@router.put("/{announcement_id}", response_model=Announcement)
def update_announcement(
    announcement_id: int,
    announcement_in: AnnouncementUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
    service: AnnouncementService = Depends(get_announcement_service),
) -> Any:
    """
    Edit the message of an announcement; broadcasts ``announcementUpdate``.

    Raises:
        400 ValidationError: empty message
        403 AuthorizationError: announcement belongs to another gym
        404 NotFoundError: announcement not found
    """
    return service.update(db, principal, announcement_id, announcement_in)


@router.delete("/{announcement_id}", status_code=204)
def delete_announcement(
    announcement_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
    service: AnnouncementService = Depends(get_announcement_service),
) -> Response:
    """Delete an announcement; broadcasts ``announcementDelete`` with its id."""
    service.delete(db, principal, announcement_id)
    return Response(status_code=204)

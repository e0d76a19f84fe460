from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import utcnow
from church_portal.core.departments import is_valid_department
from church_portal.core.errors import NotFoundError, ValidationError
from church_portal.db.session import get_session
from church_portal.models.announcement import Announcement
from church_portal.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementResponse,
    AnnouncementUpdate,
)
from church_portal.schemas.common import MessageResponse

LATEST_LIMIT = 10

router = APIRouter()
admin_router = APIRouter()


async def _deactivate_older(session: AsyncSession, announcement_date, keep_id: Optional[int] = None) -> None:
    """Only the newest dated announcements stay on the home page."""
    query = (
        update(Announcement)
        .where(Announcement.is_active == True, Announcement.announcement_date < announcement_date)  # noqa: E712
        .values(is_active=False, updated_at=utcnow())
    )
    if keep_id is not None:
        query = query.where(Announcement.id != keep_id)
    await session.execute(query)


def _validate_announcement_fields(announcement_data: AnnouncementCreate) -> None:
    if not announcement_data.title.strip() or not announcement_data.content.strip():
        raise ValidationError("Title, content, and announcement date are required")
    if announcement_data.department and not is_valid_department(announcement_data.department):
        raise ValidationError("Invalid department")


# ==========================================
# A. PUBLIC
# ==========================================

@router.get("/latest", response_model=List[AnnouncementResponse])
async def latest_announcements(
    session: AsyncSession = Depends(get_session),
) -> Any:
    result = await session.execute(
        select(Announcement)
        .where(Announcement.is_active == True)  # noqa: E712
        .order_by(Announcement.announcement_date.desc(), Announcement.created_at.desc())
        .limit(LATEST_LIMIT)
    )
    return result.scalars().all()


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: int,
    session: AsyncSession = Depends(get_session),
) -> Any:
    announcement = await session.get(Announcement, announcement_id)
    if not announcement:
        raise NotFoundError("Anuncio no encontrado")
    return announcement


# ==========================================
# B. ADMIN
# ==========================================

@admin_router.get("/", response_model=List[AnnouncementResponse])
async def list_announcements(
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|inactive)$"),
    session: AsyncSession = Depends(get_session),
):
    """All announcements, newest date first. `?status=active|inactive` narrows the list."""
    query = select(Announcement)
    if status_filter:
        query = query.where(Announcement.is_active == (status_filter == "active"))
    result = await session.execute(
        query.order_by(Announcement.announcement_date.desc(), Announcement.created_at.desc())
    )
    return result.scalars().all()


@admin_router.post("/", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    announcement_data: AnnouncementCreate,
    session: AsyncSession = Depends(get_session),
):
    """Publish an announcement. Active ones with an earlier date are taken down."""
    _validate_announcement_fields(announcement_data)

    if announcement_data.is_active:
        await _deactivate_older(session, announcement_data.announcement_date)

    announcement = Announcement(**announcement_data.model_dump())
    session.add(announcement)
    await session.commit()
    await session.refresh(announcement)
    return announcement


@admin_router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: int,
    announcement_data: AnnouncementUpdate,
    session: AsyncSession = Depends(get_session),
):
    _validate_announcement_fields(announcement_data)

    announcement = await session.get(Announcement, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")

    moved_forward = announcement_data.announcement_date > announcement.announcement_date
    if announcement_data.is_active and moved_forward:
        await _deactivate_older(session, announcement_data.announcement_date, keep_id=announcement.id)

    for key, value in announcement_data.model_dump().items():
        setattr(announcement, key, value)
    announcement.updated_at = utcnow()

    await session.commit()
    await session.refresh(announcement)
    return announcement


@admin_router.delete("/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(
    announcement_id: int,
    session: AsyncSession = Depends(get_session),
):
    announcement = await session.get(Announcement, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")

    await session.delete(announcement)
    await session.commit()
    return MessageResponse(message="Announcement deleted successfully")

import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import utcnow
from church_portal.db.session import get_session
from church_portal.models.friend import FriendRequest
from church_portal.schemas.friend import (
    FriendRequestCreate,
    FriendRequestResponse,
    FriendRequestResult,
    ReadToggle,
)

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


@router.post("/", response_model=FriendRequestResult)
async def create_friend_request(
    friend_in: FriendRequestCreate,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """A visitor leaves their contact to ask for prayer, a visit or information."""
    friend = FriendRequest(
        name=friend_in.name,
        phone=friend_in.phone,
        address=friend_in.address or "",
        reason=friend_in.reason,
    )
    session.add(friend)
    await session.commit()
    await session.refresh(friend)

    logger.info("Friend request %s received", friend.id, extra={"component": "friends"})
    return FriendRequestResult(friend=FriendRequestResponse.model_validate(friend))


@admin_router.get("/", response_model=List[FriendRequestResponse])
async def list_friend_requests(
    session: AsyncSession = Depends(get_session),
):
    """All friend requests, newest first."""
    result = await session.execute(select(FriendRequest).order_by(FriendRequest.created_at.desc()))
    return result.scalars().all()


@admin_router.patch("/{friend_id}/read", response_model=FriendRequestResult)
async def mark_friend_request(
    friend_id: int,
    toggle: ReadToggle,
    session: AsyncSession = Depends(get_session),
):
    """Mark a request as read, or back to unread."""
    friend = await session.get(FriendRequest, friend_id)
    if not friend:
        raise HTTPException(status_code=404, detail="Friend request not found")

    friend.is_read = toggle.is_read
    friend.updated_at = utcnow()
    await session.commit()
    await session.refresh(friend)
    return FriendRequestResult(friend=FriendRequestResponse.model_validate(friend))

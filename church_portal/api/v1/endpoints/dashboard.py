from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.db.session import get_session
from church_portal.models.enums import FriendRequestReason
from church_portal.models.friend import FriendRequest
from church_portal.models.member import Member
from church_portal.schemas.member import BaptismYearCount, DashboardStats, ReasonCount

admin_router = APIRouter()


@admin_router.get("/", response_model=DashboardStats)
async def dashboard_stats(
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Totals for the admin home: friend requests by reason and members by baptism year."""
    total_members = await session.scalar(select(func.count(Member.id)))
    total_friends = await session.scalar(select(func.count(FriendRequest.id)))

    by_reason = dict((await session.execute(
        select(FriendRequest.reason, func.count(FriendRequest.id)).group_by(FriendRequest.reason)
    )).all())
    by_year = await session.execute(
        select(Member.baptism_year, func.count(Member.id))
        .where(Member.baptism_year.is_not(None))
        .group_by(Member.baptism_year)
        .order_by(Member.baptism_year.asc())
    )

    return DashboardStats(
        total_members=total_members or 0,
        total_friends=total_friends or 0,
        chart_data=[
            ReasonCount(name=reason.value.capitalize(), value=by_reason.get(reason, 0))
            for reason in FriendRequestReason
        ],
        year_chart_data=[BaptismYearCount(year=year, count=count) for year, count in by_year.all()],
    )

"""Read-side helpers shared by the admin roster, children and member views."""

from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.models.child import ChildGuardian
from church_portal.models.member import Member
from church_portal.schemas.child import GuardianSummary


async def load_guardians(
    session: AsyncSession, child_ids: List[int]
) -> Dict[int, List[GuardianSummary]]:
    """Map child id -> guardians ordered by relationship, in one query."""
    if not child_ids:
        return {}
    result = await session.execute(
        select(ChildGuardian.child_id, ChildGuardian.relationship, Member)
        .join(Member, ChildGuardian.member_id == Member.id)
        .where(ChildGuardian.child_id.in_(child_ids))
        .order_by(ChildGuardian.relationship.asc())
    )
    guardians: Dict[int, List[GuardianSummary]] = {}
    for child_id, relationship, member in result.all():
        guardians.setdefault(child_id, []).append(
            GuardianSummary(
                id=member.id,
                name=member.name,
                document_id=member.document_id,
                phone=member.phone,
                email=member.email,
                relationship=relationship,
            )
        )
    return guardians

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import utcnow
from church_portal.core.errors import NotFoundError, ValidationError
from church_portal.core.turnstile import require_turnstile
from church_portal.db.session import get_session
from church_portal.models.child import Child, ChildGuardian
from church_portal.models.member import Member
from church_portal.schemas.child import ChildOfMember
from church_portal.schemas.member import (
    MemberLookupResponse,
    MemberProfile,
    MemberProfileUpdate,
    MemberRegistration,
    MemberResponse,
    MemberSummary,
)
from church_portal.services.store import DuplicateRowError, SqlEnrollmentStore

router = APIRouter()
admin_router = APIRouter()


@router.get("/search", response_model=MemberSummary)
async def search_member(
    document_id: Optional[str] = Query(None, alias="documentID"),
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Find a member by document ID (used to prefill guardian/parent fields)."""
    if not document_id or not document_id.strip():
        raise ValidationError("Document ID is required")

    member = await SqlEnrollmentStore(session).find_member_by_document(document_id.strip())
    if not member:
        raise NotFoundError("Member not found")
    return member


# ==========================================
# Member registration form
# ==========================================

@router.get("/", response_model=MemberLookupResponse, dependencies=[Depends(require_turnstile)])
async def lookup_member(
    document_id: Optional[str] = Query(None, alias="documentID"),
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Resume the registration form: the full profile if the document is on record."""
    if not document_id or not document_id.strip():
        raise ValidationError("Document ID is required")

    member = await SqlEnrollmentStore(session).find_member_by_document(document_id.strip())
    if not member:
        return MemberLookupResponse(found=False)
    return MemberLookupResponse(found=True, member=MemberProfile.model_validate(member))


@router.post(
    "/",
    response_model=MemberProfile,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_turnstile)],
)
async def register_member(
    member_in: MemberRegistration,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """First step of the form: create the member with identity and contact."""
    store = SqlEnrollmentStore(session)
    if await store.find_member_by_document(member_in.document_id):
        raise ValidationError("Member already registered")

    try:
        member = await store.add(Member(
            document_id=member_in.document_id,
            name=member_in.name,
            phone=member_in.phone,
        ))
    except DuplicateRowError:
        raise ValidationError("Member already registered")
    await session.commit()
    await session.refresh(member)
    return member


@router.put("/", response_model=MemberProfile, dependencies=[Depends(require_turnstile)])
async def update_member_profile(
    profile_in: MemberProfileUpdate,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Later steps of the form: replace only the fields present in the body."""
    member = await SqlEnrollmentStore(session).find_member_by_document(profile_in.document_id)
    if not member:
        raise NotFoundError("Member not found")

    changes = profile_in.model_dump(exclude_unset=True, exclude={"document_id", "token"})
    for key, value in changes.items():
        if value is None and key in ("name", "phone", "willing_to_lead", "transfer_authorization"):
            continue
        setattr(member, key, value)
    member.updated_at = utcnow()

    await session.commit()
    await session.refresh(member)
    return member


@admin_router.get("/", response_model=List[MemberResponse])
async def list_members(
    session: AsyncSession = Depends(get_session),
):
    """All members, newest first."""
    result = await session.execute(select(Member).order_by(Member.created_at.desc()))
    return result.scalars().all()


@admin_router.get("/{member_id}/children", response_model=List[ChildOfMember])
async def list_member_children(
    member_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Children this member is linked to, with the slot they fill for each."""
    member = await session.get(Member, member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    result = await session.execute(
        select(Child, ChildGuardian.relationship)
        .join(ChildGuardian, ChildGuardian.child_id == Child.id)
        .where(ChildGuardian.member_id == member_id)
        .order_by(Child.name.asc())
    )
    return [
        ChildOfMember(**child.model_dump(), relationship=relationship)
        for child, relationship in result.all()
    ]

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.errors import ValidationError
from church_portal.core.turnstile import require_turnstile
from church_portal.db.session import get_session
from church_portal.models.child import Child
from church_portal.schemas.child import (
    ChildResponse,
    ChildSearchRequest,
    ChildSearchResponse,
    ChildWithGuardians,
)
from church_portal.services.directory import load_guardians
from church_portal.services.store import SqlEnrollmentStore

router = APIRouter()
admin_router = APIRouter()


@router.post(
    "/search",
    response_model=ChildSearchResponse,
    dependencies=[Depends(require_turnstile)],
)
async def search_child(
    search_in: ChildSearchRequest,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """
    Look a child up by document ID so the enrollment form can prefill it.
    Not finding one is a normal answer (found=false), not a 404.
    """
    document_id = (search_in.document_id or "").strip()
    if not document_id:
        raise ValidationError("documentID is required")

    child = await SqlEnrollmentStore(session).find_child_by_document(document_id)
    if child:
        return ChildSearchResponse(
            message="Child found",
            document_id=document_id,
            found=True,
            child=ChildResponse.model_validate(child),
        )
    return ChildSearchResponse(
        message="Child not found",
        document_id=document_id,
        found=False,
        child=None,
    )


@admin_router.get("/", response_model=List[ChildWithGuardians])
async def list_children(
    session: AsyncSession = Depends(get_session),
):
    """All children ordered by name, each with their guardians."""
    result = await session.execute(select(Child).order_by(Child.name.asc()))
    children = result.scalars().all()

    guardians = await load_guardians(session, [c.id for c in children])
    return [
        ChildWithGuardians.model_validate(child).model_copy(
            update={"guardians": guardians.get(child.id, [])}
        )
        for child in children
    ]

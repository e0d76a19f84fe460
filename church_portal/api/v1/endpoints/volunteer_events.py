import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import utcnow
from church_portal.core.errors import NotFoundError, ValidationError
from church_portal.core.turnstile import require_turnstile
from church_portal.db.session import get_session
from church_portal.models.member import Member
from church_portal.models.volunteer import VolunteerEvent, VolunteerRegistration
from church_portal.schemas.common import MessageResponse
from church_portal.schemas.volunteer import (
    RegisteredMember,
    RegistrationCheck,
    RegistrationCreated,
    ServiceCapacity,
    VolunteerEventCreate,
    VolunteerEventPublic,
    VolunteerEventResponse,
    VolunteerEventUpdate,
    VolunteerEventWithCount,
    VolunteerRegistrationRequest,
    VolunteerRegistrationResponse,
    VolunteerRegistrationWithMember,
)
from church_portal.services.volunteers import (
    check_service_seat,
    check_volunteer_request,
    service_capacities,
    upsert_volunteer,
)

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


async def _active_event(session: AsyncSession, event_id: int) -> VolunteerEvent:
    event = await session.scalar(
        select(VolunteerEvent).where(
            VolunteerEvent.id == event_id, VolunteerEvent.is_active == True  # noqa: E712
        )
    )
    if not event:
        raise NotFoundError("Event not found or inactive")
    return event


async def _find_registration(
    session: AsyncSession, event_id: int, document_id: str
) -> Optional[VolunteerRegistration]:
    return await session.scalar(
        select(VolunteerRegistration).where(
            VolunteerRegistration.volunteer_event_id == event_id,
            VolunteerRegistration.member_document_id == document_id,
        )
    )


# ==========================================
# A. PUBLIC
# ==========================================

@router.get("/{event_id}", response_model=VolunteerEventPublic)
async def get_volunteer_event(
    event_id: int,
    session: AsyncSession = Depends(get_session),
) -> Any:
    return await _active_event(session, event_id)


@router.get("/{event_id}/capacities", response_model=Dict[str, ServiceCapacity])
async def get_service_capacities(
    event_id: int,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Registrations so far and the limit of each service, keyed by service name."""
    event = await _active_event(session, event_id)
    return await service_capacities(session, event)


@router.get("/{event_id}/check-registration", response_model=RegistrationCheck)
async def check_registration(
    event_id: int,
    document_id: Optional[str] = Query(None, alias="documentID"),
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Prefill the form for a volunteer who already signed up for this event."""
    if not document_id or not document_id.strip():
        raise ValidationError("Document ID is required")

    row = (await session.execute(
        select(VolunteerRegistration, Member)
        .outerjoin(Member, VolunteerRegistration.member_id == Member.id)
        .where(
            VolunteerRegistration.volunteer_event_id == event_id,
            VolunteerRegistration.member_document_id == document_id.strip(),
        )
    )).first()
    if row is None:
        raise NotFoundError("Not registered")

    registration, member = row
    return RegistrationCheck(
        **VolunteerRegistrationResponse.model_validate(registration).model_dump(),
        name=member.name if member else None,
        phone=member.phone if member else None,
        birth_date=member.birth_date if member else None,
    )


@router.post(
    "/{event_id}/register",
    response_model=RegistrationCreated,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_turnstile)],
)
async def register_volunteer(
    event_id: int,
    registration_in: VolunteerRegistrationRequest,
    session: AsyncSession = Depends(get_session),
) -> Any:
    check_volunteer_request(registration_in)
    event = await _active_event(session, event_id)

    if await _find_registration(session, event.id, registration_in.member_document_id):
        raise ValidationError("Ya estás registrado para este evento")
    await check_service_seat(session, event, registration_in.selected_service)

    now = utcnow()
    member = await upsert_volunteer(session, registration_in, now)
    registration = VolunteerRegistration(
        volunteer_event_id=event.id,
        member_document_id=registration_in.member_document_id,
        member_id=member.id,
        selected_service=registration_in.selected_service,
        has_transport=registration_in.has_transport,
        transport_slots=registration_in.transport_slots or None,
        diet_type=registration_in.diet_type or "",
        created_at=now,
        updated_at=now,
    )
    session.add(registration)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValidationError("Ya estás registrado para este evento")

    logger.info(
        "Volunteer %s registered for event %s", registration.id, event.id,
        extra={"component": "volunteers"},
    )
    return RegistrationCreated(message="Registration successful", id=registration.id)


@router.put(
    "/{event_id}/register",
    response_model=MessageResponse,
    dependencies=[Depends(require_turnstile)],
)
async def update_volunteer_registration(
    event_id: int,
    registration_in: VolunteerRegistrationRequest,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Change the service, transport or diet of an existing registration."""
    check_volunteer_request(registration_in)
    event = await _active_event(session, event_id)

    registration = await _find_registration(session, event.id, registration_in.member_document_id)
    if not registration:
        raise NotFoundError("Not registered")
    await check_service_seat(
        session, event, registration_in.selected_service, current_service=registration.selected_service
    )

    now = utcnow()
    member = await upsert_volunteer(session, registration_in, now)
    registration.member_id = member.id
    registration.selected_service = registration_in.selected_service
    registration.has_transport = registration_in.has_transport
    registration.transport_slots = registration_in.transport_slots or None
    registration.diet_type = registration_in.diet_type or ""
    registration.updated_at = now
    await session.commit()

    return MessageResponse(message="Registration updated successfully")


# ==========================================
# B. ADMIN
# ==========================================

async def _get_event_or_404(session: AsyncSession, event_id: int) -> VolunteerEvent:
    event = await session.get(VolunteerEvent, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Volunteer event not found")
    return event


@admin_router.get("/", response_model=List[VolunteerEventWithCount])
async def list_volunteer_events(
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|inactive)$"),
    session: AsyncSession = Depends(get_session),
):
    """Events by date, newest first, with how many volunteers signed up."""
    query = (
        select(VolunteerEvent, func.count(VolunteerRegistration.id))
        .outerjoin(VolunteerRegistration, VolunteerRegistration.volunteer_event_id == VolunteerEvent.id)
        .group_by(VolunteerEvent.id)
        .order_by(VolunteerEvent.event_date.desc(), VolunteerEvent.created_at.desc())
    )
    if status_filter:
        query = query.where(VolunteerEvent.is_active == (status_filter == "active"))
    result = await session.execute(query)
    return [
        VolunteerEventWithCount(
            **VolunteerEventResponse.model_validate(event).model_dump(),
            registration_count=count,
        )
        for event, count in result.all()
    ]


@admin_router.post("/", response_model=VolunteerEventResponse, status_code=status.HTTP_201_CREATED)
async def create_volunteer_event(
    event_data: VolunteerEventCreate,
    session: AsyncSession = Depends(get_session),
):
    if not event_data.title.strip() or not event_data.description.strip():
        raise ValidationError("Title, description, and event date are required")

    event = VolunteerEvent(**event_data.model_dump())
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


@admin_router.get("/{event_id}", response_model=VolunteerEventResponse)
async def get_volunteer_event_admin(
    event_id: int,
    session: AsyncSession = Depends(get_session),
):
    return await _get_event_or_404(session, event_id)


@admin_router.put("/{event_id}", response_model=VolunteerEventResponse)
async def update_volunteer_event(
    event_id: int,
    event_data: VolunteerEventUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Partial update: only the fields sent are changed."""
    event = await _get_event_or_404(session, event_id)

    changes = event_data.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")

    for key, value in changes.items():
        setattr(event, key, value)
    event.updated_at = utcnow()

    await session.commit()
    await session.refresh(event)
    return event


@admin_router.delete("/{event_id}", response_model=MessageResponse)
async def delete_volunteer_event(
    event_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Delete an event together with its registrations."""
    event = await _get_event_or_404(session, event_id)

    await session.execute(
        delete(VolunteerRegistration).where(VolunteerRegistration.volunteer_event_id == event.id)
    )
    await session.delete(event)
    await session.commit()
    return MessageResponse(message="Volunteer event deleted successfully")


@admin_router.get("/{event_id}/registrations", response_model=List[VolunteerRegistrationWithMember])
async def list_volunteer_registrations(
    event_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Registrations newest first, each with the volunteer's contact data."""
    await _get_event_or_404(session, event_id)

    result = await session.execute(
        select(VolunteerRegistration, Member)
        .outerjoin(Member, VolunteerRegistration.member_document_id == Member.document_id)
        .where(VolunteerRegistration.volunteer_event_id == event_id)
        .order_by(VolunteerRegistration.created_at.desc())
    )
    return [
        VolunteerRegistrationWithMember(
            **VolunteerRegistrationResponse.model_validate(registration).model_dump(),
            member=RegisteredMember.model_validate(member) if member else None,
        )
        for registration, member in result.all()
    ]


@admin_router.delete("/{event_id}/registrations/{registration_id}", response_model=MessageResponse)
async def delete_volunteer_registration(
    event_id: int,
    registration_id: int,
    session: AsyncSession = Depends(get_session),
):
    registration = await session.get(VolunteerRegistration, registration_id)
    if not registration or registration.volunteer_event_id != event_id:
        raise HTTPException(status_code=404, detail="Registration not found")

    await session.delete(registration)
    await session.commit()
    return MessageResponse(message="Registration deleted successfully")

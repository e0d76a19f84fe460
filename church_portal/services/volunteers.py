"""
Volunteer sign-up rules for events.

An event lists its services and, at the same index, the seat limit of each
(None or 0 means unlimited). A volunteer picks one service per event.
"""

from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import age_on
from church_portal.core.errors import ValidationError
from church_portal.models.member import Member
from church_portal.models.volunteer import VolunteerEvent, VolunteerRegistration
from church_portal.schemas.volunteer import VolunteerRegistrationRequest
from church_portal.services.store import DuplicateRowError, SqlEnrollmentStore

MIN_VOLUNTEER_AGE = 16


def check_volunteer_request(request: VolunteerRegistrationRequest) -> None:
    if not all([
        request.member_document_id,
        request.member_name,
        request.member_phone,
        request.member_birth_date,
        request.selected_service,
    ]):
        raise ValidationError("Document, name, phone, birth date, and service are required")
    if age_on(request.member_birth_date) < MIN_VOLUNTEER_AGE:
        raise ValidationError("Volunteer must be at least 16 years old")


def service_limit(event: VolunteerEvent, service: str) -> Optional[int]:
    services = event.services or []
    capacities = event.max_capacities or []
    index = services.index(service)
    if index < len(capacities):
        return capacities[index] or None
    return None


async def service_counts(session: AsyncSession, event_id: int) -> Dict[str, int]:
    result = await session.execute(
        select(VolunteerRegistration.selected_service, func.count(VolunteerRegistration.id))
        .where(VolunteerRegistration.volunteer_event_id == event_id)
        .group_by(VolunteerRegistration.selected_service)
    )
    return dict(result.all())


async def service_capacities(session: AsyncSession, event: VolunteerEvent) -> Dict[str, dict]:
    """{service: {"current": registrations, "max": limit or None}} in the event's order."""
    counts = await service_counts(session, event.id)
    return {
        service: {"current": counts.get(service, 0), "max": service_limit(event, service)}
        for service in event.services or []
    }


async def check_service_seat(
    session: AsyncSession,
    event: VolunteerEvent,
    service: str,
    current_service: Optional[str] = None,
) -> None:
    """
    Reject a service the event does not offer, or one that is full.
    `current_service` is the volunteer's existing choice; keeping it never
    counts as taking a new seat.
    """
    if service not in (event.services or []):
        raise ValidationError("Invalid service for this event")
    if service == current_service:
        return
    limit = service_limit(event, service)
    if limit is None:
        return
    taken = (await service_counts(session, event.id)).get(service, 0)
    if taken >= limit:
        raise ValidationError("El servicio seleccionado ha alcanzado su capacidad máxima")


async def upsert_volunteer(
    session: AsyncSession, request: VolunteerRegistrationRequest, now: datetime
) -> Member:
    """Create or refresh the member record of the volunteer, keyed by document ID."""
    store = SqlEnrollmentStore(session)
    member = await store.find_member_by_document(request.member_document_id)
    if member is None:
        try:
            return await store.add(Member(
                document_id=request.member_document_id,
                name=request.member_name,
                phone=request.member_phone,
                birth_date=request.member_birth_date,
                created_at=now,
                updated_at=now,
            ))
        except DuplicateRowError:
            member = await store.find_member_by_document(request.member_document_id)
            if member is None:
                raise

    member.name = request.member_name
    member.phone = request.member_phone
    member.birth_date = request.member_birth_date
    member.updated_at = now
    await store.save(member)
    return member

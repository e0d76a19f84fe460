from sqlmodel import SQLModel, Field
from typing import List, Optional
from datetime import date, datetime
from sqlalchemy import Column, JSON, UniqueConstraint

from church_portal.models.timestamps import timestamp_field


class VolunteerEvent(SQLModel, table=True):
    __tablename__ = "volunteer_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    event_date: date = Field(index=True)
    # Service names volunteers choose from, and the seat limit of each
    # (same index; None means unlimited)
    services: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    max_capacities: Optional[List[Optional[int]]] = Field(default=None, sa_column=Column(JSON))
    is_active: bool = Field(default=True)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class VolunteerRegistration(SQLModel, table=True):
    """A member volunteering for one service of an event."""
    __tablename__ = "volunteer_registrations"
    __table_args__ = (
        UniqueConstraint(
            "volunteer_event_id", "member_document_id", name="uq_volunteer_registration_member"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    volunteer_event_id: int = Field(foreign_key="volunteer_events.id", index=True)
    member_document_id: str = Field(index=True)
    member_id: Optional[int] = Field(default=None, foreign_key="members.id")
    selected_service: str
    has_transport: bool = Field(default=False)
    transport_slots: Optional[int] = None
    diet_type: str

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

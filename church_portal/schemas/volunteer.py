from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VolunteerEventCreate(BaseModel):
    title: str
    description: str
    event_date: date
    services: Optional[List[str]] = None
    max_capacities: Optional[List[Optional[int]]] = None
    is_active: bool = True


class VolunteerEventUpdate(BaseModel):
    """Partial update: only the fields sent are changed."""
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[date] = None
    services: Optional[List[str]] = None
    max_capacities: Optional[List[Optional[int]]] = None
    is_active: Optional[bool] = None


class VolunteerEventPublic(BaseModel):
    id: int
    title: str
    description: str
    event_date: date
    services: Optional[List[str]] = None
    is_active: bool

    class Config:
        from_attributes = True


class VolunteerEventResponse(VolunteerEventPublic):
    max_capacities: Optional[List[Optional[int]]] = None
    created_at: datetime
    updated_at: datetime


class VolunteerEventWithCount(VolunteerEventResponse):
    registration_count: int = 0


class ServiceCapacity(BaseModel):
    current: int
    max: Optional[int] = None


class VolunteerRegistrationRequest(BaseModel):
    """Body of the public volunteer form (register and update)."""
    model_config = ConfigDict(populate_by_name=True)

    member_document_id: Optional[str] = Field(default=None, alias="memberDocumentID")
    member_name: Optional[str] = Field(default=None, alias="memberName")
    member_phone: Optional[str] = Field(default=None, alias="memberPhone")
    member_birth_date: Optional[date] = Field(default=None, alias="memberBirthDate")
    selected_service: Optional[str] = Field(default=None, alias="selectedService")
    has_transport: bool = Field(default=False, alias="hasTransport")
    transport_slots: Optional[int] = Field(default=None, alias="transportSlots")
    diet_type: Optional[str] = Field(default=None, alias="dietType")
    token: Optional[str] = None

    @field_validator(
        "member_document_id", "member_name", "member_phone", "selected_service", "diet_type",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("has_transport", mode="before")
    @classmethod
    def null_flag_is_false(cls, value):
        return False if value is None else value


class RegistrationCreated(BaseModel):
    message: str
    id: int


class RegisteredMember(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None

    class Config:
        from_attributes = True


class VolunteerRegistrationResponse(BaseModel):
    id: int
    volunteer_event_id: int
    member_document_id: str
    member_id: Optional[int] = None
    selected_service: str
    has_transport: bool
    transport_slots: Optional[int] = None
    diet_type: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VolunteerRegistrationWithMember(VolunteerRegistrationResponse):
    member: Optional[RegisteredMember] = None


class RegistrationCheck(VolunteerRegistrationResponse):
    """An existing registration with the volunteer's current contact data."""
    name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None

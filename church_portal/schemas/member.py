from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MemberSummary(BaseModel):
    """What the public lookup exposes about a member."""
    id: int
    name: str
    phone: str
    birth_date: Optional[date] = None

    class Config:
        from_attributes = True


class MemberResponse(MemberSummary):
    document_id: str
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ==========================================
# Member registration
# ==========================================

class MemberRegistration(BaseModel):
    """First step of the member form: identity and contact."""
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(alias="documentID", min_length=1)
    name: str = Field(min_length=2)
    phone: str = Field(min_length=5)
    token: Optional[str] = None


class MemberProfileFields(BaseModel):
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    birth_date: Optional[date] = None
    preferred_contact_method: Optional[str] = None
    baptism_year: Optional[int] = None
    ministry: Optional[str] = None
    areas_to_serve: Optional[str] = None
    willing_to_lead: Optional[bool] = None
    suggestions: Optional[str] = None
    pastoral_notes: Optional[str] = None
    current_acceptance_year: Optional[int] = None
    current_acceptance_method: Optional[str] = None
    current_membership_church: Optional[str] = None
    transfer_authorization: Optional[bool] = None
    current_occupation: Optional[str] = None
    work_or_study_place: Optional[str] = None
    professional_area: Optional[str] = None
    education_level: Optional[str] = None
    profession: Optional[str] = None
    work_experience: Optional[str] = None
    technical_skills: Optional[str] = None
    soft_skills: Optional[str] = None
    languages: Optional[str] = None
    medical_conditions: Optional[str] = None
    special_needs: Optional[str] = None
    interests_hobbies: Optional[str] = None
    volunteering_availability: Optional[str] = None


class MemberProfileUpdate(MemberProfileFields):
    """
    Later steps of the member form. Fields left out of the body are kept;
    fields sent (even empty) are replaced.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document_id: str = Field(alias="documentID", min_length=1)
    name: Optional[str] = None
    phone: Optional[str] = Field(default=None, min_length=5)
    token: Optional[str] = None


class MemberProfile(MemberProfileFields):
    id: int
    document_id: str
    name: str
    phone: str
    willing_to_lead: bool = False
    transfer_authorization: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MemberLookupResponse(BaseModel):
    found: bool
    member: Optional[MemberProfile] = None


# ==========================================
# Dashboard
# ==========================================

class ReasonCount(BaseModel):
    name: str
    value: int


class BaptismYearCount(BaseModel):
    year: int
    count: int


class DashboardStats(BaseModel):
    total_members: int
    total_friends: int
    chart_data: List[ReasonCount]
    year_chart_data: List[BaptismYearCount]

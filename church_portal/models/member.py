from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime

from church_portal.models.timestamps import timestamp_field


class Member(SQLModel, table=True):
    """An adult on record: parent, guardian, volunteer or registered church member."""
    __tablename__ = "members"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    document_id: str = Field(unique=True, index=True)
    phone: str
    email: Optional[str] = None
    birth_date: Optional[date] = None

    # Membership profile, filled in from the member registration form
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    address: Optional[str] = None
    preferred_contact_method: Optional[str] = None
    baptism_year: Optional[int] = None
    ministry: Optional[str] = None
    areas_to_serve: Optional[str] = None
    willing_to_lead: bool = Field(default=False)
    suggestions: Optional[str] = None
    pastoral_notes: Optional[str] = None

    # Transfer from another congregation
    current_acceptance_year: Optional[int] = None
    current_acceptance_method: Optional[str] = None
    current_membership_church: Optional[str] = None
    transfer_authorization: bool = Field(default=False)

    # Professional / skills
    current_occupation: Optional[str] = None
    work_or_study_place: Optional[str] = None
    professional_area: Optional[str] = None
    education_level: Optional[str] = None
    profession: Optional[str] = None
    work_experience: Optional[str] = None
    technical_skills: Optional[str] = None
    soft_skills: Optional[str] = None
    languages: Optional[str] = None

    # Health and availability
    medical_conditions: Optional[str] = None
    special_needs: Optional[str] = None
    interests_hobbies: Optional[str] = None
    volunteering_availability: Optional[str] = None

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

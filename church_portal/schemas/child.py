from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from church_portal.models.enums import GuardianRelationship


class ChildResponse(BaseModel):
    id: int
    name: str
    document_id: str
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GuardianSummary(BaseModel):
    """A member as seen from the child's side of a ChildGuardian link."""
    id: int
    name: str
    document_id: str
    phone: str
    email: Optional[str] = None
    relationship: GuardianRelationship


class ChildWithGuardians(ChildResponse):
    guardians: List[GuardianSummary] = []


class ChildOfMember(ChildResponse):
    relationship: GuardianRelationship


class ChildSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_id: Optional[str] = Field(default=None, alias="documentID")
    token: Optional[str] = None


class ChildSearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    document_id: str = Field(alias="documentID")
    found: bool
    child: Optional[ChildResponse] = None

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime
from sqlalchemy import Column, Enum as SQLAEnum, UniqueConstraint

from church_portal.models.enums import GuardianRelationship
from church_portal.models.timestamps import timestamp_field


class Child(SQLModel, table=True):
    __tablename__ = "children"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    document_id: str = Field(unique=True, index=True)
    gender: Optional[str] = None
    birth_date: Optional[date] = None

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class ChildGuardian(SQLModel, table=True):
    """Links a child to the member filling one relationship slot."""
    __tablename__ = "child_guardians"
    __table_args__ = (
        UniqueConstraint("child_id", "relationship", name="uq_child_guardian_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    child_id: int = Field(foreign_key="children.id", index=True)
    member_id: int = Field(foreign_key="members.id", index=True)
    relationship: GuardianRelationship = Field(
        sa_column=Column(
            SQLAEnum(GuardianRelationship, name="guardian_relationship",
                     values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        )
    )

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

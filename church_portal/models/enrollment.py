from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import UniqueConstraint

from church_portal.models.timestamps import timestamp_field


class Enrollment(SQLModel, table=True):
    """A child registered in a program. One row per (program, child)."""
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("program_id", "child_id", name="uq_enrollment_program_child"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    program_id: int = Field(foreign_key="programs.id", index=True)
    child_id: int = Field(foreign_key="children.id", index=True)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

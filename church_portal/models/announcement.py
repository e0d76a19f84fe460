from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime

from church_portal.models.timestamps import timestamp_field


class Announcement(SQLModel, table=True):
    """A dated notice shown on the home page while active."""
    __tablename__ = "announcements"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    content: str
    announcement_date: date = Field(index=True)
    # Code from church_portal.core.departments, optional
    department: Optional[str] = None
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from church_portal.models.timestamps import timestamp_field


class Program(SQLModel, table=True):
    """A church program children can be enrolled in."""
    __tablename__ = "programs"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    # Code from church_portal.core.departments
    department: str = Field(index=True)
    content: Optional[str] = None
    is_active: bool = Field(default=True)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

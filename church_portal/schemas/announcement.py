from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime


class AnnouncementCreate(BaseModel):
    title: str
    content: str
    announcement_date: date
    department: Optional[str] = None
    is_active: bool = True


class AnnouncementUpdate(AnnouncementCreate):
    pass


class AnnouncementResponse(BaseModel):
    id: int
    title: str
    content: str
    announcement_date: date
    department: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

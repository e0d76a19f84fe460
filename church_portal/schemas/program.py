from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProgramCreate(BaseModel):
    title: str
    department: str
    content: Optional[str] = None
    is_active: bool = True


class ProgramUpdate(BaseModel):
    title: str
    department: str
    content: Optional[str] = None
    is_active: bool = True


class ProgramResponse(BaseModel):
    id: int
    title: str
    department: str
    content: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProgramWithCount(ProgramResponse):
    enrollment_count: int = 0

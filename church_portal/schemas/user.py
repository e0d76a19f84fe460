from pydantic import BaseModel, EmailStr
from typing import Optional
from church_portal.models.enums import AdminRole


class AdminUserBase(BaseModel):
    email: EmailStr
    full_name: str
    role: AdminRole = AdminRole.ADMIN


class AdminUserCreate(AdminUserBase):
    password: str


class AdminUserResponse(AdminUserBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True

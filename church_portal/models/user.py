from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import Column, Enum as SQLAEnum

from church_portal.models.enums import AdminRole
from church_portal.models.timestamps import timestamp_field


class AdminUser(SQLModel, table=True):
    """Dashboard user with role-based access control."""
    __tablename__ = "admin_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    full_name: str
    role: AdminRole = Field(
        sa_column=Column(
            SQLAEnum(AdminRole, name="admin_role",
                     values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        )
    )
    is_active: bool = Field(default=True)
    created_at: datetime = timestamp_field()
    updated_at: Optional[datetime] = timestamp_field(nullable=True)

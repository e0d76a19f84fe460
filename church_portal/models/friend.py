from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import Column, Enum as SQLAEnum

from church_portal.models.enums import FriendRequestReason
from church_portal.models.timestamps import timestamp_field


class FriendRequest(SQLModel, table=True):
    """A visitor asking for prayer, a visit or information."""
    __tablename__ = "friend_requests"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    phone: str
    address: str = Field(default="")
    reason: FriendRequestReason = Field(
        sa_column=Column(
            SQLAEnum(FriendRequestReason, name="friend_request_reason",
                     values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        )
    )
    is_read: bool = Field(default=False, index=True)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from church_portal.models.enums import FriendRequestReason


class FriendRequestCreate(BaseModel):
    name: str = Field(min_length=2)
    phone: str = Field(min_length=5)
    address: Optional[str] = None
    reason: FriendRequestReason


class FriendRequestResponse(BaseModel):
    id: int
    name: str
    phone: str
    address: str
    reason: FriendRequestReason
    is_read: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FriendRequestResult(BaseModel):
    success: bool = True
    friend: FriendRequestResponse


class ReadToggle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_read: bool = Field(alias="isRead")

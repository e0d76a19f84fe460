from sqlalchemy import DateTime
from sqlmodel import Field

from church_portal.core.clock import utcnow


def timestamp_field(nullable: bool = False):
    """created_at / updated_at column: timezone-aware, filled with the UTC time on insert."""
    if nullable:
        return Field(default=None, sa_type=DateTime(timezone=True), nullable=True)
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime
from sqlalchemy import Column, Enum as SQLAEnum, UniqueConstraint

from church_portal.models.enums import CourseEnrollmentStatus
from church_portal.models.timestamps import timestamp_field

DEFAULT_COURSE_COLOR = "#4b207f"


class Course(SQLModel, table=True):
    """An adult course with its own landing page at /curso/{slug}."""
    __tablename__ = "courses"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    slug: str = Field(unique=True, index=True)
    description: str
    content: str
    image_url: Optional[str] = None
    color: str = Field(default=DEFAULT_COURSE_COLOR)
    cost: float = Field(default=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # Seats split half members, half visitors. None means unlimited.
    capacity: Optional[int] = None
    is_active: bool = Field(default=True)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class CourseEnrollment(SQLModel, table=True):
    """An adult signed up for a course. One row per (course, document number)."""
    __tablename__ = "course_enrollments"
    __table_args__ = (
        UniqueConstraint("course_id", "document_number", name="uq_course_enrollment_document"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    course_id: int = Field(foreign_key="courses.id", index=True)
    document_number: str = Field(index=True)
    full_name: str
    phone: str
    birth_date: date
    is_member: bool = Field(default=False)
    payment_proof_url: Optional[str] = None
    status: CourseEnrollmentStatus = Field(
        default=CourseEnrollmentStatus.PENDING,
        sa_column=Column(
            SQLAEnum(CourseEnrollmentStatus, name="course_enrollment_status",
                     values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        ),
    )

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

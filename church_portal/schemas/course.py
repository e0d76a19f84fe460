from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from church_portal.models.course import DEFAULT_COURSE_COLOR
from church_portal.models.enums import CourseEnrollmentStatus


# ==========================================
# A. ADMIN
# ==========================================

class CourseCreate(BaseModel):
    title: str
    description: str
    content: str
    image_url: Optional[str] = None
    color: str = DEFAULT_COURSE_COLOR
    cost: float = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    capacity: Optional[int] = None
    is_active: bool = True


class CourseUpdate(BaseModel):
    """Partial update: only the fields sent are changed."""
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    color: Optional[str] = None
    cost: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    capacity: Optional[int] = None
    is_active: Optional[bool] = None


class CourseResponse(BaseModel):
    id: int
    title: str
    slug: str
    description: str
    content: str
    image_url: Optional[str] = None
    color: str
    cost: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    capacity: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CourseStatusCounts(BaseModel):
    enrollments: int = 0
    pending: int = 0
    confirmed: int = 0
    rejected: int = 0


class CourseWithCounts(CourseResponse):
    counts: CourseStatusCounts = CourseStatusCounts()


class CourseEnrollmentResponse(BaseModel):
    id: int
    course_id: int
    document_number: str
    full_name: str
    phone: str
    birth_date: date
    is_member: bool
    payment_proof_url: Optional[str] = None
    status: CourseEnrollmentStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CourseEnrollmentStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enrollment_id: int = Field(alias="enrollmentId")
    status: CourseEnrollmentStatus


# ==========================================
# B. PUBLIC
# ==========================================

class CoursePublic(CourseResponse):
    """Course landing page data with the seat split between members and visitors."""
    enrollment_count: int = 0
    member_count: int = 0
    non_member_count: int = 0
    member_quota: Optional[int] = None
    non_member_quota: Optional[int] = None
    member_spots_left: Optional[int] = None
    non_member_spots_left: Optional[int] = None
    is_full: bool = False


class CourseEnrollmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_number: Optional[str] = Field(default=None, alias="documentNumber")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    phone: Optional[str] = None
    birth_date: Optional[date] = Field(default=None, alias="birthDate")
    is_member: bool = Field(default=False, alias="isMember")
    payment_proof_url: Optional[str] = Field(default=None, alias="paymentProofUrl")
    token: Optional[str] = None

    @field_validator("document_number", "full_name", "phone", "payment_proof_url", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("is_member", mode="before")
    @classmethod
    def null_flag_is_false(cls, value):
        return False if value is None else value


class CourseEnrollmentSummary(BaseModel):
    id: int
    course_id: int
    full_name: str
    status: CourseEnrollmentStatus

    class Config:
        from_attributes = True


class CourseEnrollmentCreated(BaseModel):
    success: bool = True
    message: str
    enrollment: CourseEnrollmentSummary


class CheckEnrollmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_number: Optional[str] = Field(default=None, alias="documentNumber")


class ExistingCourseEnrollment(BaseModel):
    id: int
    full_name: str
    phone: str
    status: CourseEnrollmentStatus
    created_at: datetime

    class Config:
        from_attributes = True


class CheckEnrollmentResponse(BaseModel):
    found: bool
    enrollment: Optional[ExistingCourseEnrollment] = None

"""
Course rules: slugs for the landing page URL and the seat split between
church members and visitors.

A course with a capacity reserves half of it (rounded down) for members and
the rest for visitors. A group may take the other group's free seats, so a
sign-up is only turned away once the whole course is full.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import age_on
from church_portal.core.errors import ValidationError
from church_portal.models.course import Course, CourseEnrollment
from church_portal.models.enums import CourseEnrollmentStatus
from church_portal.schemas.course import CourseEnrollmentRequest

MIN_COURSE_AGE = 18
COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def slugify(title: str) -> str:
    """'Matrimonios Sólidos 2025' -> 'matrimonios-solidos-2025'"""
    text = unicodedata.normalize("NFD", title.lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[^a-z0-9\s-]", "", text)
    text = re.sub(r"\s+", "-", text.strip())
    return re.sub(r"-+", "-", text)


async def unique_slug(session: AsyncSession, title: str, exclude_id: Optional[int] = None) -> str:
    base = slugify(title)
    candidate, suffix = base, 0
    while True:
        query = select(Course.id).where(Course.slug == candidate)
        if exclude_id is not None:
            query = query.where(Course.id != exclude_id)
        if await session.scalar(query) is None:
            return candidate
        suffix += 1
        candidate = f"{base}-{suffix}"


def validate_course_fields(color: Optional[str], cost: Optional[float]) -> None:
    if color and not COLOR_PATTERN.match(color):
        raise ValidationError("Invalid color format. Use hex format: #RRGGBB")
    if cost is not None and cost < 0:
        raise ValidationError("Cost cannot be negative")


@dataclass
class SeatAvailability:
    capacity: Optional[int]
    enrollment_count: int = 0
    member_count: int = 0
    non_member_count: int = 0

    @property
    def member_quota(self) -> Optional[int]:
        return self.capacity // 2 if self.capacity else None

    @property
    def non_member_quota(self) -> Optional[int]:
        return self.capacity - self.member_quota if self.capacity else None

    @property
    def member_spots_left(self) -> Optional[int]:
        if not self.capacity:
            return None
        return max(0, self.member_quota - self.member_count)

    @property
    def non_member_spots_left(self) -> Optional[int]:
        if not self.capacity:
            return None
        return max(0, self.non_member_quota - self.non_member_count)

    @property
    def is_full(self) -> bool:
        return bool(self.capacity) and self.enrollment_count >= self.capacity

    def as_dict(self) -> dict:
        return {
            "enrollment_count": self.enrollment_count,
            "member_count": self.member_count,
            "non_member_count": self.non_member_count,
            "member_quota": self.member_quota,
            "non_member_quota": self.non_member_quota,
            "member_spots_left": self.member_spots_left,
            "non_member_spots_left": self.non_member_spots_left,
            "is_full": self.is_full,
        }


async def seat_availability(session: AsyncSession, course: Course) -> SeatAvailability:
    row = (await session.execute(
        select(
            func.count(CourseEnrollment.id),
            func.coalesce(func.sum(case((CourseEnrollment.is_member == True, 1), else_=0)), 0),  # noqa: E712
        ).where(CourseEnrollment.course_id == course.id)
    )).one()
    total, members = row
    return SeatAvailability(
        capacity=course.capacity,
        enrollment_count=total,
        member_count=members,
        non_member_count=total - members,
    )


async def status_counts(session: AsyncSession, course_ids) -> dict:
    """{course_id: {"enrollments", "pending", "confirmed", "rejected"}}"""
    if not course_ids:
        return {}
    columns = [
        func.coalesce(func.sum(case((CourseEnrollment.status == status, 1), else_=0)), 0)
        for status in CourseEnrollmentStatus
    ]
    result = await session.execute(
        select(CourseEnrollment.course_id, func.count(CourseEnrollment.id), *columns)
        .where(CourseEnrollment.course_id.in_(course_ids))
        .group_by(CourseEnrollment.course_id)
    )
    counts = {}
    for course_id, total, *by_status in result.all():
        counts[course_id] = {"enrollments": total}
        counts[course_id].update(
            {status.value: count for status, count in zip(CourseEnrollmentStatus, by_status)}
        )
    return counts


def check_course_enrollment(request: CourseEnrollmentRequest) -> None:
    """Field and age checks that run before the course is looked up."""
    if not all([request.document_number, request.full_name, request.phone, request.birth_date]):
        raise ValidationError("Todos los campos son requeridos")
    if age_on(request.birth_date) < MIN_COURSE_AGE:
        raise ValidationError("Debes ser mayor de 18 años para inscribirte")


def check_seat(course: Course, seats: SeatAvailability, request: CourseEnrollmentRequest) -> None:
    if seats.is_full:
        raise ValidationError("El curso ha alcanzado su capacidad máxima")
    if course.cost > 0 and not request.payment_proof_url:
        raise ValidationError("Se requiere comprobante de pago para este curso")

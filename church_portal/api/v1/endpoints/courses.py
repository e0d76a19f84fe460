import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import utcnow
from church_portal.core.errors import NotFoundError, ValidationError
from church_portal.core.turnstile import require_turnstile
from church_portal.db.session import get_session
from church_portal.models.course import Course, CourseEnrollment
from church_portal.schemas.course import (
    CheckEnrollmentRequest,
    CheckEnrollmentResponse,
    CourseCreate,
    CourseEnrollmentCreated,
    CourseEnrollmentRequest,
    CourseEnrollmentResponse,
    CourseEnrollmentStatusUpdate,
    CourseEnrollmentSummary,
    CoursePublic,
    CourseResponse,
    CourseStatusCounts,
    CourseUpdate,
    CourseWithCounts,
    ExistingCourseEnrollment,
)
from church_portal.services.courses import (
    check_course_enrollment,
    check_seat,
    seat_availability,
    status_counts,
    unique_slug,
    validate_course_fields,
)

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


async def _active_course(session: AsyncSession, slug: str) -> Course:
    course = await session.scalar(
        select(Course).where(Course.slug == slug, Course.is_active == True)  # noqa: E712
    )
    if not course:
        raise NotFoundError("Curso no encontrado")
    return course


# ==========================================
# A. PUBLIC
# ==========================================

@router.get("/{slug}", response_model=CoursePublic)
async def get_course(
    slug: str,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Landing page data for an active course, with the remaining seats."""
    course = await _active_course(session, slug)
    seats = await seat_availability(session, course)
    return CoursePublic(**CourseResponse.model_validate(course).model_dump(), **seats.as_dict())


@router.post(
    "/{slug}/enroll",
    response_model=CourseEnrollmentCreated,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_turnstile)],
)
async def enroll_in_course(
    slug: str,
    enrollment_in: CourseEnrollmentRequest,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """
    Sign an adult up for a course.
    New enrollments start as `pending` until an admin confirms the payment.
    """
    check_course_enrollment(enrollment_in)

    course = await _active_course(session, slug)
    check_seat(course, await seat_availability(session, course), enrollment_in)

    existing = await session.scalar(
        select(CourseEnrollment.id).where(
            CourseEnrollment.course_id == course.id,
            CourseEnrollment.document_number == enrollment_in.document_number,
        )
    )
    if existing is not None:
        raise ValidationError("Ya estás inscrito en este curso")

    enrollment = CourseEnrollment(
        course_id=course.id,
        document_number=enrollment_in.document_number,
        full_name=enrollment_in.full_name,
        phone=enrollment_in.phone,
        birth_date=enrollment_in.birth_date,
        is_member=enrollment_in.is_member,
        payment_proof_url=enrollment_in.payment_proof_url,
    )
    session.add(enrollment)
    try:
        await session.commit()
    except IntegrityError:
        # Same document submitted twice at once
        await session.rollback()
        raise ValidationError("Ya estás inscrito en este curso")
    await session.refresh(enrollment)

    logger.info(
        "Course enrollment %s created for course %s", enrollment.id, course.id,
        extra={"component": "courses"},
    )
    return CourseEnrollmentCreated(
        message="Inscripción registrada exitosamente",
        enrollment=CourseEnrollmentSummary.model_validate(enrollment),
    )


@router.post("/{slug}/check-enrollment", response_model=CheckEnrollmentResponse)
async def check_course_enrollment_status(
    slug: str,
    check_in: CheckEnrollmentRequest,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Tell a returning visitor whether their document is already enrolled."""
    if not check_in.document_number or not check_in.document_number.strip():
        raise ValidationError("Número de documento requerido")

    course = await _active_course(session, slug)
    enrollment = await session.scalar(
        select(CourseEnrollment).where(
            CourseEnrollment.course_id == course.id,
            CourseEnrollment.document_number == check_in.document_number.strip(),
        )
    )
    if not enrollment:
        return CheckEnrollmentResponse(found=False)
    return CheckEnrollmentResponse(
        found=True, enrollment=ExistingCourseEnrollment.model_validate(enrollment)
    )


# ==========================================
# B. ADMIN
# ==========================================

def _with_counts(course: Course, counts: dict) -> CourseWithCounts:
    return CourseWithCounts(
        **CourseResponse.model_validate(course).model_dump(),
        counts=CourseStatusCounts(**counts.get(course.id, {})),
    )


async def _get_course_or_404(session: AsyncSession, course_id: int) -> Course:
    course = await session.get(Course, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@admin_router.get("/", response_model=List[CourseWithCounts])
async def list_courses(
    session: AsyncSession = Depends(get_session),
):
    """All courses, newest first, with enrollment counts by status."""
    result = await session.execute(select(Course).order_by(Course.created_at.desc()))
    courses = result.scalars().all()
    counts = await status_counts(session, [c.id for c in courses])
    return [_with_counts(course, counts) for course in courses]


@admin_router.post("/", response_model=CourseWithCounts, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    session: AsyncSession = Depends(get_session),
):
    if not course_data.title.strip() or not course_data.description.strip() or not course_data.content.strip():
        raise ValidationError("Title, description, and content are required")
    validate_course_fields(course_data.color, course_data.cost)

    course = Course(
        **course_data.model_dump(),
        slug=await unique_slug(session, course_data.title),
    )
    session.add(course)
    await session.commit()
    await session.refresh(course)

    return _with_counts(course, {})


@admin_router.get("/{course_id}", response_model=CourseWithCounts)
async def get_course_admin(
    course_id: int,
    session: AsyncSession = Depends(get_session),
):
    course = await _get_course_or_404(session, course_id)
    return _with_counts(course, await status_counts(session, [course.id]))


@admin_router.put("/{course_id}", response_model=CourseWithCounts)
async def update_course(
    course_id: int,
    course_data: CourseUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Update the fields sent. A new title gives the course a new slug."""
    course = await _get_course_or_404(session, course_id)

    changes = course_data.model_dump(exclude_unset=True)
    validate_course_fields(changes.get("color"), changes.get("cost"))

    new_title = changes.get("title")
    if new_title and new_title != course.title:
        course.slug = await unique_slug(session, new_title, exclude_id=course.id)
    for key, value in changes.items():
        if value is None and key in ("title", "description", "content", "color", "cost", "is_active"):
            continue
        setattr(course, key, value)
    course.updated_at = utcnow()

    await session.commit()
    await session.refresh(course)
    return _with_counts(course, await status_counts(session, [course.id]))


@admin_router.delete("/{course_id}")
async def delete_course(
    course_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Delete a course together with its enrollments."""
    course = await _get_course_or_404(session, course_id)

    await session.execute(delete(CourseEnrollment).where(CourseEnrollment.course_id == course.id))
    await session.delete(course)
    await session.commit()

    return {"success": True}


@admin_router.get("/{course_id}/enrollments", response_model=List[CourseEnrollmentResponse])
async def list_course_enrollments(
    course_id: int,
    session: AsyncSession = Depends(get_session),
):
    await _get_course_or_404(session, course_id)
    result = await session.execute(
        select(CourseEnrollment)
        .where(CourseEnrollment.course_id == course_id)
        .order_by(CourseEnrollment.created_at.desc())
    )
    return result.scalars().all()


@admin_router.put("/{course_id}/enrollments", response_model=CourseEnrollmentResponse)
async def update_course_enrollment_status(
    course_id: int,
    update_in: CourseEnrollmentStatusUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Confirm or reject an enrollment (usually after checking the payment proof)."""
    enrollment = await session.get(CourseEnrollment, update_in.enrollment_id)
    if not enrollment or enrollment.course_id != course_id:
        raise HTTPException(status_code=404, detail="Enrollment not found")

    enrollment.status = update_in.status
    enrollment.updated_at = utcnow()
    await session.commit()
    await session.refresh(enrollment)
    return enrollment

from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.clock import utcnow
from church_portal.core.departments import is_valid_department
from church_portal.core.errors import NotFoundError, ValidationError
from church_portal.db.session import get_session
from church_portal.models.child import Child
from church_portal.models.enrollment import Enrollment
from church_portal.models.program import Program
from church_portal.schemas.child import ChildWithGuardians
from church_portal.schemas.enrollment import EnrollmentRosterEntry
from church_portal.schemas.program import (
    ProgramCreate,
    ProgramResponse,
    ProgramUpdate,
    ProgramWithCount,
)
from church_portal.services.directory import load_guardians
from church_portal.services.store import SqlEnrollmentStore

router = APIRouter()
admin_router = APIRouter()


# ==========================================
# A. PUBLIC
# ==========================================

@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program(
    program_id: int,
    session: AsyncSession = Depends(get_session),
) -> Any:
    """Landing page data for an active program."""
    program = await SqlEnrollmentStore(session).find_program(program_id, active_only=True)
    if not program:
        raise NotFoundError("Program not found or inactive")
    return program


# ==========================================
# B. ADMIN
# ==========================================

def _validate_program_fields(program_data: ProgramCreate) -> None:
    if not program_data.title.strip() or not program_data.department:
        raise ValidationError("Title and department are required")
    if not is_valid_department(program_data.department):
        raise ValidationError("Invalid department")


def _with_count(program: Program, count: int) -> ProgramWithCount:
    return ProgramWithCount(
        **ProgramResponse.model_validate(program).model_dump(),
        enrollment_count=count,
    )


@admin_router.get("/", response_model=List[ProgramWithCount])
async def list_programs(
    session: AsyncSession = Depends(get_session),
):
    """All programs, active or not, newest first, with enrollment counts."""
    query = (
        select(Program, func.count(Enrollment.id))
        .outerjoin(Enrollment, Enrollment.program_id == Program.id)
        .group_by(Program.id)
        .order_by(Program.created_at.desc())
    )
    result = await session.execute(query)
    return [_with_count(program, count) for program, count in result.all()]


@admin_router.post("/", response_model=ProgramWithCount, status_code=status.HTTP_201_CREATED)
async def create_program(
    program_data: ProgramCreate,
    session: AsyncSession = Depends(get_session),
):
    """Create a new program in one of the church departments."""
    _validate_program_fields(program_data)

    new_program = Program(**program_data.model_dump())
    session.add(new_program)
    await session.commit()
    await session.refresh(new_program)

    return _with_count(new_program, 0)


@admin_router.put("/{program_id}", response_model=ProgramWithCount)
async def update_program(
    program_id: int,
    program_data: ProgramUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Replace a program's title, department, content and active flag."""
    _validate_program_fields(program_data)

    program = await session.get(Program, program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")

    for key, value in program_data.model_dump().items():
        setattr(program, key, value)
    program.updated_at = utcnow()

    await session.commit()
    await session.refresh(program)

    count = await session.scalar(
        select(func.count(Enrollment.id)).where(Enrollment.program_id == program.id)
    )
    return _with_count(program, count or 0)


@admin_router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_program(
    program_id: int,
    session: AsyncSession = Depends(get_session),
):
    """
    Soft delete a program.
    It stops accepting enrollments but its roster is preserved.
    """
    program = await session.get(Program, program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")

    program.is_active = False
    program.updated_at = utcnow()
    await session.commit()

    return None


@admin_router.get("/{program_id}/enrollments", response_model=List[EnrollmentRosterEntry])
async def list_program_enrollments(
    program_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Roster of a program: each enrollment with its child and the child's guardians."""
    program = await session.get(Program, program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")

    result = await session.execute(
        select(Enrollment, Child)
        .join(Child, Enrollment.child_id == Child.id)
        .where(Enrollment.program_id == program_id)
        .order_by(Enrollment.created_at.desc())
    )
    rows = result.all()

    guardians = await load_guardians(session, [child.id for _, child in rows])
    return [
        EnrollmentRosterEntry(
            id=enrollment.id,
            program_id=enrollment.program_id,
            child_id=enrollment.child_id,
            created_at=enrollment.created_at,
            updated_at=enrollment.updated_at,
            child=ChildWithGuardians.model_validate(child).model_copy(
                update={"guardians": guardians.get(child.id, [])}
            ),
        )
        for enrollment, child in rows
    ]


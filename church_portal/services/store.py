"""
Data access used by the enrollment workflow.

The workflow only talks to an `EnrollmentStore`; `SqlEnrollmentStore` is the
database-backed implementation bound to the request's `AsyncSession`.
Nothing here commits: the caller owns the transaction.
"""

import logging
from typing import Optional, Protocol, TypeVar, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.models.child import Child, ChildGuardian
from church_portal.models.enrollment import Enrollment
from church_portal.models.enums import GuardianRelationship
from church_portal.models.member import Member
from church_portal.models.program import Program

logger = logging.getLogger(__name__)

Row = TypeVar("Row", Child, Member, ChildGuardian, Enrollment)


class DuplicateRowError(Exception):
    """An insert hit a unique key: another request created the row first."""


class DuplicateEnrollmentError(DuplicateRowError):
    """The (program, child) pair is already enrolled."""

    def __init__(self, program_id: int, child_id: int):
        super().__init__(f"Child {child_id} is already enrolled in program {program_id}")
        self.program_id = program_id
        self.child_id = child_id


class EnrollmentStore(Protocol):
    async def find_program(self, program_id: int, *, active_only: bool = True) -> Optional[Program]: ...

    async def find_child_by_document(self, document_id: str) -> Optional[Child]: ...

    async def find_member_by_document(self, document_id: str) -> Optional[Member]: ...

    async def find_guardian_link(
        self, child_id: int, relationship: GuardianRelationship
    ) -> Optional[ChildGuardian]: ...

    async def find_enrollment(self, program_id: int, child_id: int) -> Optional[Enrollment]: ...

    async def add(self, row: Row) -> Row:
        """Insert a new row and return it with its id assigned; raise DuplicateRowError on a unique key."""
        ...

    async def save(self, row: Union[Child, Member, ChildGuardian, Enrollment]) -> None:
        """Persist changes made to a row previously returned by the store."""
        ...

    async def insert_enrollment(self, enrollment: Enrollment) -> Enrollment:
        """Insert an enrollment; raise DuplicateEnrollmentError on the unique (program, child) key."""
        ...


class SqlEnrollmentStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_program(self, program_id: int, *, active_only: bool = True) -> Optional[Program]:
        query = select(Program).where(Program.id == program_id)
        if active_only:
            query = query.where(Program.is_active == True)  # noqa: E712
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_child_by_document(self, document_id: str) -> Optional[Child]:
        result = await self.session.execute(
            select(Child).where(Child.document_id == document_id)
        )
        return result.scalar_one_or_none()

    async def find_member_by_document(self, document_id: str) -> Optional[Member]:
        result = await self.session.execute(
            select(Member).where(Member.document_id == document_id)
        )
        return result.scalar_one_or_none()

    async def find_guardian_link(
        self, child_id: int, relationship: GuardianRelationship
    ) -> Optional[ChildGuardian]:
        result = await self.session.execute(
            select(ChildGuardian).where(
                ChildGuardian.child_id == child_id,
                ChildGuardian.relationship == relationship,
            )
        )
        return result.scalar_one_or_none()

    async def find_enrollment(self, program_id: int, child_id: int) -> Optional[Enrollment]:
        result = await self.session.execute(
            select(Enrollment).where(
                Enrollment.program_id == program_id,
                Enrollment.child_id == child_id,
            )
        )
        return result.scalar_one_or_none()

    async def add(self, row: Row) -> Row:
        try:
            async with self.session.begin_nested():
                self.session.add(row)
                await self.session.flush()  # Flush to get the ID
        except IntegrityError as exc:
            logger.info(
                "Insert into %s hit a unique key", row.__tablename__,
                extra={"component": "enrollment"},
            )
            raise DuplicateRowError(row.__tablename__) from exc
        return row

    async def save(self, row) -> None:
        self.session.add(row)
        await self.session.flush()

    async def insert_enrollment(self, enrollment: Enrollment) -> Enrollment:
        # Savepoint so a unique violation leaves the outer transaction usable
        try:
            async with self.session.begin_nested():
                self.session.add(enrollment)
                await self.session.flush()
        except IntegrityError as exc:
            logger.info(
                "Enrollment insert hit the unique key",
                extra={"component": "enrollment", "program_id": enrollment.program_id},
            )
            raise DuplicateEnrollmentError(enrollment.program_id, enrollment.child_id) from exc
        return enrollment

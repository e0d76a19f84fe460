"""
Enrollment reconciliation.

Runs when a parent or guardian submits a child to a program:

1. validate the submission (nothing is written if this fails)
2. check the program exists and is active
3. upsert the child by document ID
4. upsert the guardian, or the father and mother, by document ID
5. point each relationship slot at the resolved member
6. insert the enrollment; if the (program, child) pair already exists,
   refresh its updated_at instead

Each step is keyed by document ID, so a repeated or concurrent submission
resolves to the same rows.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from church_portal.core.clock import utcnow
from church_portal.core.errors import NotFoundError
from church_portal.models.child import Child, ChildGuardian
from church_portal.models.enrollment import Enrollment
from church_portal.models.enums import GuardianRelationship
from church_portal.models.member import Member
from church_portal.schemas.enrollment import EnrollmentRequest
from church_portal.services.store import DuplicateEnrollmentError, DuplicateRowError, EnrollmentStore

logger = logging.getLogger(__name__)


@dataclass
class MemberInput:
    name: str
    document_id: str
    phone: str


@dataclass
class EnrollmentOutcome:
    enrollment_id: int
    child_id: int
    created: bool
    members: Dict[GuardianRelationship, int] = field(default_factory=dict)

    @property
    def message(self) -> str:
        if self.created:
            return "Enrollment created successfully"
        return "Enrollment updated successfully"


def members_by_slot(request: EnrollmentRequest) -> Dict[GuardianRelationship, MemberInput]:
    """The relationship slots a submission fills, in write order."""
    if request.use_guardian:
        return {
            GuardianRelationship.GUARDIAN: MemberInput(
                request.guardian_name, request.guardian_document_id, request.guardian_phone
            ),
        }
    return {
        GuardianRelationship.FATHER: MemberInput(
            request.father_name, request.father_document_id, request.father_phone
        ),
        GuardianRelationship.MOTHER: MemberInput(
            request.mother_name, request.mother_document_id, request.mother_phone
        ),
    }


class EnrollmentService:
    def __init__(self, store: EnrollmentStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def enroll(self, request: EnrollmentRequest) -> EnrollmentOutcome:
        request.validate_required()

        program = await self.store.find_program(request.program_id, active_only=True)
        if program is None:
            raise NotFoundError("Program not found or inactive")

        now = self.clock()
        child = await self.upsert_child(request, now)

        members: Dict[GuardianRelationship, int] = {}
        slots = members_by_slot(request)
        for relationship, member_in in slots.items():
            member = await self.upsert_member(member_in, now)
            members[relationship] = member.id
        child_id, program_id = child.id, program.id
        for relationship, member_id in members.items():
            await self.link_guardian(child_id, member_id, relationship, now)

        enrollment_id, created = await self.write_enrollment(program_id, child_id, now)
        logger.info(
            "Enrollment %s for child %s in program %s",
            "created" if created else "refreshed",
            child_id,
            program_id,
            extra={"component": "enrollment", "program_id": program_id, "enrollment_id": enrollment_id},
        )
        return EnrollmentOutcome(
            enrollment_id=enrollment_id, child_id=child_id, created=created, members=members
        )

    # --- Upserts ---

    async def upsert_child(self, request: EnrollmentRequest, now: datetime) -> Child:
        child = await self.store.find_child_by_document(request.child_document_id)
        if child is None:
            try:
                return await self.store.add(Child(
                    name=request.child_name,
                    document_id=request.child_document_id,
                    gender=request.child_gender,
                    birth_date=request.child_birth_date,
                    created_at=now,
                    updated_at=now,
                ))
            except DuplicateRowError:
                # A concurrent submission registered the same document first
                child = await self.store.find_child_by_document(request.child_document_id)
                if child is None:
                    raise

        # Latest submission wins, including clearing optional fields
        child.name = request.child_name
        child.gender = request.child_gender
        child.birth_date = request.child_birth_date
        child.updated_at = now
        await self.store.save(child)
        return child

    async def upsert_member(self, member_in: MemberInput, now: datetime) -> Member:
        member = await self.store.find_member_by_document(member_in.document_id)
        if member is None:
            try:
                return await self.store.add(Member(
                    name=member_in.name,
                    document_id=member_in.document_id,
                    phone=member_in.phone,
                    created_at=now,
                    updated_at=now,
                ))
            except DuplicateRowError:
                member = await self.store.find_member_by_document(member_in.document_id)
                if member is None:
                    raise

        member.name = member_in.name
        member.phone = member_in.phone
        member.updated_at = now
        await self.store.save(member)
        return member

    async def link_guardian(
        self,
        child_id: int,
        member_id: int,
        relationship: GuardianRelationship,
        now: datetime,
    ) -> ChildGuardian:
        link = await self.store.find_guardian_link(child_id, relationship)
        if link is None:
            try:
                return await self.store.add(ChildGuardian(
                    child_id=child_id,
                    member_id=member_id,
                    relationship=relationship,
                    created_at=now,
                    updated_at=now,
                ))
            except DuplicateRowError:
                link = await self.store.find_guardian_link(child_id, relationship)
                if link is None:
                    raise

        link.member_id = member_id
        link.updated_at = now
        await self.store.save(link)
        return link

    # --- Enrollment ---

    async def write_enrollment(self, program_id: int, child_id: int, now: datetime) -> Tuple[int, bool]:
        """Return (enrollment id, created)."""
        try:
            enrollment = await self.store.insert_enrollment(Enrollment(
                program_id=program_id,
                child_id=child_id,
                created_at=now,
                updated_at=now,
            ))
            return enrollment.id, True
        except DuplicateEnrollmentError:
            existing: Optional[Enrollment] = await self.store.find_enrollment(program_id, child_id)
            if existing is None:
                raise
            existing.updated_at = now
            await self.store.save(existing)
            return existing.id, False

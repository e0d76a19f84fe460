"""In-memory EnrollmentStore enforcing the same unique keys as the database."""

from itertools import count
from typing import Dict, List, Optional, Tuple

from church_portal.models.child import Child, ChildGuardian
from church_portal.models.enrollment import Enrollment
from church_portal.models.enums import GuardianRelationship
from church_portal.models.member import Member
from church_portal.models.program import Program
from church_portal.services.store import DuplicateEnrollmentError, DuplicateRowError


class InMemoryEnrollmentStore:
    def __init__(self):
        self.programs: Dict[int, Program] = {}
        self.children: Dict[int, Child] = {}
        self.members: Dict[int, Member] = {}
        self.links: Dict[int, ChildGuardian] = {}
        self.enrollments: Dict[int, Enrollment] = {}
        self.writes: List[Tuple[str, object]] = []
        self._ids = count(1)
        # Simulates a concurrent request winning the insert race
        self.enrollment_race: Optional[Enrollment] = None
        # Rows a concurrent request inserts right before our next add() of the same type
        self.rivals: List[object] = []

    def add_program(self, title="Club de Aventureros", is_active=True) -> Program:
        program = Program(id=next(self._ids), title=title, department="club-aventureros", is_active=is_active)
        self.programs[program.id] = program
        return program

    # --- reads ---

    async def find_program(self, program_id, *, active_only=True):
        program = self.programs.get(program_id)
        if program is None or (active_only and not program.is_active):
            return None
        return program

    async def find_child_by_document(self, document_id):
        return next((c for c in self.children.values() if c.document_id == document_id), None)

    async def find_member_by_document(self, document_id):
        return next((m for m in self.members.values() if m.document_id == document_id), None)

    async def find_guardian_link(self, child_id, relationship: GuardianRelationship):
        return next(
            (l for l in self.links.values() if l.child_id == child_id and l.relationship == relationship),
            None,
        )

    async def find_enrollment(self, program_id, child_id):
        return next(
            (e for e in self.enrollments.values() if e.program_id == program_id and e.child_id == child_id),
            None,
        )

    # --- writes ---

    def _table_for(self, row) -> Dict[int, object]:
        if isinstance(row, Child):
            if any(c.document_id == row.document_id for c in self.children.values()):
                raise DuplicateRowError("children.document_id")
            return self.children
        if isinstance(row, Member):
            if any(m.document_id == row.document_id for m in self.members.values()):
                raise DuplicateRowError("members.document_id")
            return self.members
        if isinstance(row, ChildGuardian):
            if any(
                l.child_id == row.child_id and l.relationship == row.relationship
                for l in self.links.values()
            ):
                raise DuplicateRowError("child_guardians.child_id, relationship")
            return self.links
        raise TypeError(f"Unsupported row {row!r}")

    async def add(self, row):
        for rival in [r for r in self.rivals if type(r) is type(row)]:
            self.rivals.remove(rival)
            rival.id = next(self._ids)
            self._table_for(rival)[rival.id] = rival
        table = self._table_for(row)
        row.id = next(self._ids)
        table[row.id] = row
        self.writes.append(("insert", row))
        return row

    async def save(self, row):
        self.writes.append(("update", row))

    async def insert_enrollment(self, enrollment: Enrollment):
        if self.enrollment_race is not None:
            self.enrollments[self.enrollment_race.id] = self.enrollment_race
            self.enrollment_race = None
        if await self.find_enrollment(enrollment.program_id, enrollment.child_id):
            raise DuplicateEnrollmentError(enrollment.program_id, enrollment.child_id)
        enrollment.id = next(self._ids)
        self.enrollments[enrollment.id] = enrollment
        self.writes.append(("insert", enrollment))
        return enrollment

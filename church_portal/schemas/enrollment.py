from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from church_portal.core.errors import ValidationError
from church_portal.schemas.child import ChildWithGuardians


class EnrollmentRequest(BaseModel):
    """
    Body of the public enrollment form.
    Every field is optional at parse time: required fields depend on
    `useGuardian` and are checked by `validate_required()` so a missing field
    answers 400 before anything is written.
    """
    model_config = ConfigDict(populate_by_name=True)

    program_id: Optional[int] = Field(default=None, alias="programId")

    child_name: Optional[str] = Field(default=None, alias="childName")
    child_document_id: Optional[str] = Field(default=None, alias="childDocumentID")
    child_gender: Optional[str] = Field(default=None, alias="childGender")
    child_birth_date: Optional[date] = Field(default=None, alias="childBirthDate")

    # Guardian mode
    guardian_name: Optional[str] = Field(default=None, alias="guardianName")
    guardian_document_id: Optional[str] = Field(default=None, alias="guardianDocumentID")
    guardian_phone: Optional[str] = Field(default=None, alias="guardianPhone")

    # Parent mode
    father_name: Optional[str] = Field(default=None, alias="fatherName")
    father_document_id: Optional[str] = Field(default=None, alias="fatherDocumentID")
    father_phone: Optional[str] = Field(default=None, alias="fatherPhone")
    mother_name: Optional[str] = Field(default=None, alias="motherName")
    mother_document_id: Optional[str] = Field(default=None, alias="motherDocumentID")
    mother_phone: Optional[str] = Field(default=None, alias="motherPhone")

    use_guardian: bool = Field(default=False, alias="useGuardian")

    # Turnstile token, consumed by the bot-protection dependency
    token: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("use_guardian", mode="before")
    @classmethod
    def null_flag_is_false(cls, value):
        return False if value is None else value

    def validate_required(self) -> None:
        if not self.program_id or not self.child_name or not self.child_document_id:
            raise ValidationError("Missing required child fields")

        if self.use_guardian:
            if not all([self.guardian_name, self.guardian_document_id, self.guardian_phone]):
                raise ValidationError("Missing required guardian fields")
        elif not all([
            self.father_name, self.father_document_id, self.father_phone,
            self.mother_name, self.mother_document_id, self.mother_phone,
        ]):
            raise ValidationError("Missing required parent fields")


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    enrollment_id: int = Field(alias="enrollmentId")


class EnrollmentRosterEntry(BaseModel):
    """One line of a program's enrollment roster (admin)."""
    id: int
    program_id: int
    child_id: int
    created_at: datetime
    updated_at: datetime
    child: ChildWithGuardians

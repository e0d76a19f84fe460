from enum import Enum


class GuardianRelationship(str, Enum):
    """Slot a member occupies for a child. Father and mother are distinct slots;
    guardian is used when the parents are not supplied."""
    FATHER = "father"
    MOTHER = "mother"
    GUARDIAN = "guardian"


class AdminRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"


class CourseEnrollmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class FriendRequestReason(str, Enum):
    """What a visitor asks for from the contact form."""
    PRAYER = "oracion"
    VISIT = "visita"
    INFORMATION = "informacion"

# church_portal/db/base.py

from church_portal.models.user import AdminUser
from church_portal.models.program import Program
from church_portal.models.child import Child, ChildGuardian
from church_portal.models.member import Member
from church_portal.models.enrollment import Enrollment
from church_portal.models.announcement import Announcement
from church_portal.models.course import Course, CourseEnrollment
from church_portal.models.volunteer import VolunteerEvent, VolunteerRegistration
from church_portal.models.friend import FriendRequest

# Importing the classes registers their tables on SQLModel.metadata (Alembic + init_db)
__all__ = [
    "AdminUser",
    "Program",
    "Child",
    "ChildGuardian",
    "Member",
    "Enrollment",
    "Announcement",
    "Course",
    "CourseEnrollment",
    "VolunteerEvent",
    "VolunteerRegistration",
    "FriendRequest",
]

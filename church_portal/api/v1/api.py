from fastapi import APIRouter, Depends

from church_portal.api.v1.endpoints import (
    announcements,
    auth,
    children,
    courses,
    dashboard,
    enrollments,
    friends,
    members,
    programs,
    turnstile,
    users,
    volunteer_events,
)
from church_portal.core.dependencies import get_current_active_user

api_router = APIRouter()

# Public site
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["enrollments"])
api_router.include_router(programs.router, prefix="/programs", tags=["programs"])
api_router.include_router(children.router, prefix="/children", tags=["children"])
api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(announcements.router, prefix="/announcements", tags=["announcements"])
api_router.include_router(courses.router, prefix="/courses", tags=["courses"])
api_router.include_router(volunteer_events.router, prefix="/volunteer-events", tags=["volunteers"])
api_router.include_router(friends.router, prefix="/friend", tags=["friends"])
api_router.include_router(turnstile.router, tags=["turnstile"])

# Admin dashboard
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])

admin_dependencies = [Depends(get_current_active_user)]
for module, prefix in (
    (programs, "/admin/programs"),
    (children, "/admin/children"),
    (members, "/admin/members"),
    (announcements, "/admin/announcements"),
    (courses, "/admin/courses"),
    (volunteer_events, "/admin/volunteer-events"),
    (friends, "/admin/friends"),
    (dashboard, "/admin/dashboard"),
):
    api_router.include_router(
        module.admin_router, prefix=prefix, tags=["admin"], dependencies=admin_dependencies
    )

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from church_portal.core.dependencies import get_enrollment_service
from church_portal.core.errors import PortalError
from church_portal.core.turnstile import require_turnstile
from church_portal.db.session import get_session
from church_portal.schemas.enrollment import EnrollmentRequest, EnrollmentResponse
from church_portal.services.enrollment import EnrollmentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_turnstile)],
)
async def create_enrollment(
    enrollment_in: EnrollmentRequest,
    response: Response,
    service: EnrollmentService = Depends(get_enrollment_service),
    session: AsyncSession = Depends(get_session),
) -> Any:
    """
    Enroll a child in a program from the public landing page.
    - 201 when the enrollment is new.
    - 200 with the existing id when the child was already enrolled.
    """
    try:
        outcome = await service.enroll(enrollment_in)
        await session.commit()
    except PortalError:
        await session.rollback()
        raise
    except Exception:
        await session.rollback()
        logger.exception("Error creating enrollment", extra={"component": "enrollment"})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to create enrollment"},
        )

    if not outcome.created:
        response.status_code = status.HTTP_200_OK
    return EnrollmentResponse(message=outcome.message, enrollment_id=outcome.enrollment_id)

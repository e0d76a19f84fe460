from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from church_portal.db.session import get_session
from church_portal.models.user import AdminUser
from church_portal.core.dependencies import get_current_active_user, get_current_super_admin
from church_portal.core.security import get_password_hash
from church_portal.schemas.user import AdminUserCreate, AdminUserResponse

router = APIRouter()


@router.get("/me", response_model=AdminUserResponse)
async def get_current_user_info(
    current_user: AdminUser = Depends(get_current_active_user),
):
    """Get the logged-in admin."""
    return current_user


@router.post("/", response_model=AdminUserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: AdminUserCreate,
    current_user: AdminUser = Depends(get_current_super_admin),
    session: AsyncSession = Depends(get_session),
):
    """Create a dashboard user. Only a Super Admin can create users."""
    result = await session.execute(
        select(AdminUser).where(AdminUser.email == user_data.email)
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = AdminUser(
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        role=user_data.role,
        is_active=True,
    )
    session.add(new_user)
    await session.commit()
    await session.refresh(new_user)

    return new_user

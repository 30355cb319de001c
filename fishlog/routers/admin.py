"""
Admin router.

Account management and usage statistics for superusers. Superusers are
promoted with ``scripts/create_superuser.py``.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishlog.config import settings
from fishlog.crud.user import user as crud_user
from fishlog.database import get_db
from fishlog.dependencies.auth import get_current_active_superuser
from fishlog.models.user import User
from fishlog.schemas.auth import (
    AdminUser, AdminUserSummary, AdminUserUpdate, PasswordReset, SystemStats,
)
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Not enough permissions"},
        404: {"description": "User not found"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user_obj = await crud_user.get(db, id=user_id)
    if not user_obj:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found"
        )
    return user_obj


@router.get("/users", response_model=List[AdminUserSummary])
@limiter.limit("30/minute")
async def list_users(
    request: Request,
    skip: int = 0,
    limit: int = 100,
    admin: User = Depends(get_current_active_superuser),
    db: AsyncSession = Depends(get_db),
):
    """All accounts, newest first, with their entry and license counts."""
    rows = await crud_user.get_multi_with_counts(db, skip=skip, limit=limit)
    return [
        AdminUserSummary.model_validate(user_obj).model_copy(
            update={"entry_count": entries, "license_count": licenses}
        )
        for user_obj, entries, licenses in rows
    ]


@router.get("/stats", response_model=SystemStats)
@limiter.limit("30/minute")
async def get_stats(
    request: Request,
    admin: User = Depends(get_current_active_superuser),
    db: AsyncSession = Depends(get_db),
):
    """Totals across all accounts and the ten most recent journal entries."""
    return await crud_user.get_stats(db)


@router.get("/users/{user_id}", response_model=AdminUser)
@limiter.limit("30/minute")
async def get_user(
    request: Request,
    user_id: int,
    admin: User = Depends(get_current_active_superuser),
    db: AsyncSession = Depends(get_db),
):
    return await _get_user_or_404(db, user_id)


@router.put("/users/{user_id}", response_model=AdminUser)
@limiter.limit("30/minute")
async def update_user(
    request: Request,
    user_id: int,
    user_in: AdminUserUpdate,
    admin: User = Depends(get_current_active_superuser),
    db: AsyncSession = Depends(get_db),
):
    """
    Change an account's names, email, profile or flags.

    Raises:
        HTTPException: 400 if the new email belongs to another account
    """
    user_obj = await _get_user_or_404(db, user_id)
    changes = user_in.model_dump(exclude_unset=True)
    for flag in ("email", "is_active", "is_superuser"):
        if flag in changes and changes[flag] is None:
            del changes[flag]

    try:
        updated = await crud_user.update(db, db_obj=user_obj, obj_in=changes)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    logger.info(f"Admin {admin.id} updated user {user_id}: {sorted(changes)}")
    return updated


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def delete_user(
    request: Request,
    user_id: int,
    admin: User = Depends(get_current_active_superuser),
    db: AsyncSession = Depends(get_db),
):
    """Delete an account and all of its data. Admins cannot delete themselves here."""
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own admin account"
        )
    user_obj = await _get_user_or_404(db, user_id)
    await crud_user.remove(db, db_obj=user_obj)
    logger.info(f"Admin {admin.id} deleted user {user_id}")


@router.post("/users/{user_id}/reset-password", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def reset_password(
    request: Request,
    user_id: int,
    body: PasswordReset,
    admin: User = Depends(get_current_active_superuser),
    db: AsyncSession = Depends(get_db),
):
    user_obj = await _get_user_or_404(db, user_id)
    await crud_user.set_password(db, db_obj=user_obj, password=body.new_password)
    logger.info(f"Admin {admin.id} reset the password of user {user_id}")

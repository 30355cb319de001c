"""
Fishing licenses router.

Tracks a user's licenses and how soon each one expires.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishlog.config import settings
from fishlog.crud.license import fishing_license as crud_license
from fishlog.database import get_db
from fishlog.dependencies.auth import get_current_user
from fishlog.models.license import FishingLicense
from fishlog.models.user import User
from fishlog.schemas.license import License, LicenseCreate, LicenseSummary, LicenseUpdate
from fishlog.services.licenses import summarize

router = APIRouter(
    prefix="/licenses",
    tags=["licenses"],
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "License not found"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


async def _get_owned_license(db: AsyncSession, license_id: int, user: User) -> FishingLicense:
    db_obj = await crud_license.get_for_user(db, id=license_id, user_id=user.id)
    if not db_obj:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"License {license_id} not found"
        )
    return db_obj


@router.get("", response_model=List[License])
@limiter.limit("60/minute")
async def list_licenses(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The user's licenses, latest expiration first, with expiration status."""
    return await crud_license.get_multi_for_user(db, user_id=current_user.id)


@router.get("/summary", response_model=LicenseSummary)
@limiter.limit("60/minute")
async def license_summary(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    licenses = await crud_license.get_multi_for_user(db, user_id=current_user.id, limit=1000)
    return summarize(lic.end_date for lic in licenses)


@router.post("", response_model=License, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_license(
    request: Request,
    license_in: LicenseCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await crud_license.create_for_user(db, obj_in=license_in, user_id=current_user.id)


@router.put("/{license_id}", response_model=License)
@limiter.limit("30/minute")
async def update_license(
    request: Request,
    license_id: int,
    license_in: LicenseUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    db_obj = await _get_owned_license(db, license_id, current_user)
    changes = license_in.model_dump(exclude_unset=True)
    start = changes.get("start_date", db_obj.start_date)
    end = changes.get("end_date", db_obj.end_date)
    if start is None or end is None or end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date"
        )
    return await crud_license.update(db, db_obj=db_obj, obj_in=changes)


@router.delete("/{license_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
async def delete_license(
    request: Request,
    license_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    db_obj = await _get_owned_license(db, license_id, current_user)
    await crud_license.remove(db, db_obj=db_obj)

"""
Fishing license CRUD operations.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fishlog.crud.base import CRUDBase
from fishlog.models.license import FishingLicense
from fishlog.schemas.license import LicenseCreate, LicenseUpdate


class CRUDLicense(CRUDBase[FishingLicense, LicenseCreate, LicenseUpdate]):

    async def get_multi_for_user(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        skip: int = 0,
        limit: int = 100
    ) -> List[FishingLicense]:
        """A user's licenses, latest expiration first."""
        result = await db.execute(
            select(FishingLicense)
            .where(FishingLicense.user_id == user_id)
            .order_by(FishingLicense.end_date.desc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all()


fishing_license = CRUDLicense(FishingLicense)

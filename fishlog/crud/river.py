"""
Saved river CRUD operations.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fishlog.crud.base import CRUDBase
from fishlog.models.saved_river import SavedRiver
from fishlog.schemas.river import SavedRiverCreate


class CRUDSavedRiver(CRUDBase[SavedRiver, SavedRiverCreate, SavedRiverCreate]):

    async def get_by_site(self, db: AsyncSession, *, user_id: int, site_number: str) -> Optional[SavedRiver]:
        result = await db.execute(
            select(SavedRiver).where(
                SavedRiver.user_id == user_id,
                SavedRiver.site_number == site_number,
            )
        )
        return result.scalars().first()

    async def upsert(self, db: AsyncSession, *, obj_in: SavedRiverCreate, user_id: int) -> SavedRiver:
        """
        Save a gauge for the user, or update its name and location if already saved.
        """
        existing = await self.get_by_site(db, user_id=user_id, site_number=obj_in.site_number)
        if existing:
            return await self.update(
                db,
                db_obj=existing,
                obj_in={"river_name": obj_in.river_name, "location": obj_in.location},
            )
        return await self.create_for_user(db, obj_in=obj_in, user_id=user_id)


saved_river = CRUDSavedRiver(SavedRiver)

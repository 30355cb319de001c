"""
Journal entry CRUD operations.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fishlog.crud.base import CRUDBase
from fishlog.models.journal_entry import JournalEntry
from fishlog.schemas.journal import JournalEntryCreate, JournalEntryUpdate


class CRUDJournalEntry(CRUDBase[JournalEntry, JournalEntryCreate, JournalEntryUpdate]):

    async def get_multi_for_user(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        skip: int = 0,
        limit: int = 100
    ) -> List[JournalEntry]:
        """A user's entries, newest outing first."""
        result = await db.execute(
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.date.desc(), JournalEntry.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all()

    async def get_all_for_user(self, db: AsyncSession, *, user_id: int) -> List[JournalEntry]:
        result = await db.execute(
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.date.desc(), JournalEntry.id.desc())
        )
        return result.scalars().all()


journal_entry = CRUDJournalEntry(JournalEntry)

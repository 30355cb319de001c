"""
User CRUD operations.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fishlog.models.journal_entry import JournalEntry
from fishlog.models.license import FishingLicense
from fishlog.models.saved_river import SavedRiver
from fishlog.models.user import User
from fishlog.schemas.auth import UserCreate
from fishlog.utils.security import generate_api_key, hash_password


class CRUDUser:
    """
    CRUD operations for User model.
    """

    async def get(self, db: AsyncSession, id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == id))
        return result.scalars().first()

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> User:
        """
        Create a new user with hashed password and generated API key.

        Email uniqueness is enforced by the database; a duplicate raises
        ``sqlalchemy.exc.IntegrityError``.

        Args:
            db: Database session
            obj_in: User creation data

        Returns:
            Created user instance
        """
        db_obj = User(
            email=obj_in.email.lower(),
            hashed_password=hash_password(obj_in.password),
            full_name=obj_in.full_name,
            is_active=True,
            api_key=generate_api_key()
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            db: Database session
            email: User email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalars().first()

    async def get_by_api_key(self, db: AsyncSession, *, api_key: str) -> Optional[User]:
        """
        Get user by API key.

        Args:
            db: Database session
            api_key: User's API key

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.api_key == api_key))
        return result.scalars().first()

    async def regenerate_api_key(self, db: AsyncSession, *, db_obj: User) -> User:
        db_obj.api_key = generate_api_key()
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def set_password(self, db: AsyncSession, *, db_obj: User, password: str) -> User:
        db_obj.hashed_password = hash_password(password)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(self, db: AsyncSession, *, db_obj: User, obj_in: Dict[str, Any]) -> User:
        """
        Set the given columns on a user.

        A changed email is lowercased; uniqueness is enforced by the database
        and a clash raises ``sqlalchemy.exc.IntegrityError``.
        """
        for field, value in obj_in.items():
            if field == "email" and value is not None:
                value = value.lower()
            setattr(db_obj, field, value)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, db_obj: User) -> None:
        """Delete a user together with everything the account owns."""
        await db.delete(db_obj)
        await db.commit()

    async def get_multi_with_counts(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100
    ) -> List[Tuple[User, int, int]]:
        """
        Users, newest account first, with their journal entry and license counts.

        Returns:
            List of ``(user, entry_count, license_count)`` tuples
        """
        entry_count = (
            select(func.count(JournalEntry.id))
            .where(JournalEntry.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        license_count = (
            select(func.count(FishingLicense.id))
            .where(FishingLicense.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        result = await db.execute(
            select(User, entry_count, license_count)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [tuple(row) for row in result.all()]

    async def get_stats(self, db: AsyncSession, *, recent: int = 10) -> Dict[str, Any]:
        """Active user, entry, license and saved river totals plus the latest entries."""
        total_users = await db.scalar(
            select(func.count(User.id)).where(User.is_active.is_(True))
        )
        total_entries = await db.scalar(select(func.count(JournalEntry.id)))
        total_licenses = await db.scalar(select(func.count(FishingLicense.id)))
        total_saved_rivers = await db.scalar(select(func.count(SavedRiver.id)))

        result = await db.execute(
            select(JournalEntry.id, User.email, JournalEntry.created_at, JournalEntry.city_state)
            .join(User, JournalEntry.user_id == User.id)
            .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
            .limit(recent)
        )
        recent_activity = [
            {"entry_id": row.id, "email": row.email, "created_at": row.created_at, "city_state": row.city_state}
            for row in result.all()
        ]

        return {
            "total_users": total_users or 0,
            "total_entries": total_entries or 0,
            "total_licenses": total_licenses or 0,
            "total_saved_rivers": total_saved_rivers or 0,
            "recent_activity": recent_activity,
        }

    async def is_superuser(self, user: User) -> bool:
        return user.is_superuser


user = CRUDUser()

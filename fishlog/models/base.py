"""
Columns shared by every fishlog table.
"""

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from fishlog.database import Base


class BaseModel(Base):
    """Integer primary key plus database-maintained created/updated times."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def updated_at(cls):
        # Bumped by any ORM update, e.g. a flow refresh or a profile edit
        return Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        owner = getattr(self, "user_id", None)
        if owner is None:
            return f"<{self.__class__.__name__}(id={self.id})>"
        return f"<{self.__class__.__name__}(id={self.id}, user_id={owner})>"

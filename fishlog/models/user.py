"""
User database model.
"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from fishlog.models.base import BaseModel


class User(BaseModel):
    """
    An angler account.

    Authenticates with email/password (JWT) or with its API key. Owns journal
    entries, saved rivers, flow alert rules and fishing licenses, all of which
    are deleted with the account. Superusers can manage other accounts.
    """

    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)

    # Profile
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    address = Column(String(500), nullable=True)
    phone = Column(String(30), nullable=True)

    api_key = Column(String(64), unique=True, index=True, nullable=False)

    journal_entries = relationship("JournalEntry", back_populates="owner", cascade="all, delete-orphan")
    saved_rivers = relationship("SavedRiver", back_populates="owner", cascade="all, delete-orphan")
    flow_alerts = relationship("FlowAlert", back_populates="owner", cascade="all, delete-orphan")
    licenses = relationship("FishingLicense", back_populates="owner", cascade="all, delete-orphan")

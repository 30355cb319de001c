# Database models package

from fishlog.models.base import BaseModel
from fishlog.models.user import User
from fishlog.models.journal_entry import JournalEntry
from fishlog.models.saved_river import SavedRiver
from fishlog.models.flow_alert import FlowAlert
from fishlog.models.license import FishingLicense

__all__ = [
    "BaseModel",
    "User",
    "JournalEntry",
    "SavedRiver",
    "FlowAlert",
    "FishingLicense",
]

# Resolve string-referenced relationships once every model is imported
from sqlalchemy.orm import configure_mappers
configure_mappers()

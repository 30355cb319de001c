# CRUD operations package

from fishlog.crud.base import CRUDBase
from fishlog.crud.user import CRUDUser, user
from fishlog.crud.journal import CRUDJournalEntry, journal_entry
from fishlog.crud.river import CRUDSavedRiver, saved_river
from fishlog.crud.alert import CRUDFlowAlert, flow_alert
from fishlog.crud.license import CRUDLicense, fishing_license

__all__ = [
    "CRUDBase",
    "CRUDUser", "user",
    "CRUDJournalEntry", "journal_entry",
    "CRUDSavedRiver", "saved_river",
    "CRUDFlowAlert", "flow_alert",
    "CRUDLicense", "fishing_license",
]

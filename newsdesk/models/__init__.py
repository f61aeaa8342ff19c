from newsdesk.models.account import Account, AccountRole
from newsdesk.models.announcement import Announcement, AnnouncementFile

__all__ = [
    "Account",
    "AccountRole",
    "Announcement",
    "AnnouncementFile",
]

from models.auth import User, AuthSession, Account, utcnow, new_id
from models.base import Analysis, ShareLink, ContactRequest

__all__ = [
    "User",
    "AuthSession",
    "Account",
    "Analysis",
    "ShareLink",
    "ContactRequest",
    "utcnow",
    "new_id",
]

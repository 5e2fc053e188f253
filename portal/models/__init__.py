"""Database models."""

from portal.models.paper import Paper
from portal.models.user import User

__all__ = [
    "Paper",
    "User",
]

"""Repository layer for data access."""

from portal.repositories.paper_repository import PaperRepository
from portal.repositories.user_repository import UserRepository

__all__ = [
    "PaperRepository",
    "UserRepository",
]

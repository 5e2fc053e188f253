"""Repository for User model operations."""

from typing import Any, List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.user import User
from portal.utils.logger import get_logger

log = get_logger(__name__)


class UserRepository:
    """Repository for User CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by Firebase uid."""
        log.debug("query user by id", user_id=user_id)
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        log.debug("query result", found=user is not None)
        return user

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by exact (case-sensitive) username."""
        log.debug("query user by username", username=username)
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        log.debug("query user by email", email=email)
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone_number: str) -> Optional[User]:
        """Get user by phone number."""
        log.debug("query user by phone")
        result = await self.session.execute(select(User).where(User.phone_number == phone_number))
        return result.scalar_one_or_none()

    async def is_username_taken(self, username: str, exclude_id: Optional[str] = None) -> bool:
        """Check whether another account already uses this username."""
        query = select(User.id).where(User.username == username)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def is_phone_taken(self, phone_number: str, exclude_id: Optional[str] = None) -> bool:
        """Check whether another account already uses this phone number."""
        query = select(User.id).where(User.phone_number == phone_number)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def create(self, user_id: str, **fields: Any) -> User:
        """
        Create a new user profile.

        Caller is responsible for committing the transaction.
        """
        user = User(id=user_id, **fields)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        log.info("user created", user_id=user_id, username=user.username)
        return user

    async def update(self, user: User, **fields: Any) -> User:
        """
        Update profile fields.

        Caller is responsible for committing the transaction.
        """
        if not fields:
            return user
        await self.session.execute(update(User).where(User.id == user.id).values(**fields))
        await self.session.flush()
        await self.session.refresh(user)
        log.debug("user updated", user_id=user.id, fields=sorted(fields))
        return user

    async def list_all(self, offset: int = 0, limit: int = 100) -> List[User]:
        """List profiles, newest first."""
        result = await self.session.execute(
            select(User).order_by(User.created_at.desc()).offset(offset).limit(limit)
        )
        users = list(result.scalars().all())
        log.debug("users listed", returned=len(users))
        return users

"""User creation and lookups."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from message_board.core.errors import duplicate_email
from message_board.db.models import Message, User
from message_board.utils.identity import new_id, utc_now_iso

logger = logging.getLogger(__name__)


class UserService:
    """Reads and writes ``users`` rows.

    Every call opens its own session, so the service can be shared by
    concurrently running GraphQL resolvers.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def create_user(self, name: str, email: str) -> User:
        """Insert a new user.

        Args:
            name: Display name.
            email: Email address, unique across users.

        Returns:
            The persisted User.

        Raises:
            DuplicateEmailError: If the email is already registered, found
                either by the pre-insert lookup or by the UNIQUE constraint.
        """
        async with self.session_maker() as session:
            existing = await session.scalar(select(User.id).where(User.email == email))
            if existing is not None:
                logger.info("user.duplicate_email", extra={"email": email})
                raise duplicate_email()

            user = User(id=new_id(), name=name, email=email, creation_date=utc_now_iso())
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                logger.info("user.duplicate_email", extra={"email": email, "source": "constraint"})
                raise duplicate_email() from exc

        logger.info("user.created", extra={"user_id": user.id, "user_name": user.name})
        return user

    async def get_user(self, user_id: str) -> User | None:
        async with self.session_maker() as session:
            return await session.get(User, user_id)

    async def list_users(self) -> list[User]:
        """Return all users in creation order."""
        async with self.session_maker() as session:
            result = await session.scalars(
                select(User).order_by(User.creation_date, User.id)
            )
            return list(result)

    async def count_messages(self, user_id: str) -> int:
        """Number of messages posted by ``user_id``."""
        async with self.session_maker() as session:
            count = await session.scalar(
                select(func.count()).select_from(Message).where(Message.user_id == user_id)
            )
            return count or 0

"""Rate-limited message posting and message ordering.

This service is the core of the message board:
- posting: user validation, rate-limit check-and-record, persistence
- ordering: previous/next message among the same user's messages
- listings of all messages or of one user's messages
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from message_board.adapters.rate_limit.base import AbstractRateLimiter
from message_board.core.errors import rate_limit_exceeded, user_not_found
from message_board.db.models import Message, User
from message_board.utils.identity import new_id, utc_now_iso

logger = logging.getLogger(__name__)

POST_USER_NOT_FOUND = "User not found. Cannot post message."

# Creation order; the id breaks ties between equal timestamps deterministically
_CHRONOLOGICAL = (Message.creation_date.asc(), Message.id.asc())


class MessageService:
    """Service for posting and listing messages.

    Attributes:
        session_maker: Factory for short-lived store sessions.
        rate_limiter: Per-user posting budget, owned by the application.
        clock: Time source (UNIX seconds) fed to the rate limiter.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        rate_limiter: AbstractRateLimiter,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.session_maker = session_maker
        self.rate_limiter = rate_limiter
        self.clock = clock

    async def post_message(self, user_id: str, body: str) -> Message:
        """Post a message on behalf of an existing user.

        Args:
            user_id: Identifier of the posting user.
            body: Message text.

        Returns:
            The persisted Message.

        Raises:
            NotFoundError: If no user has this id. Nothing is recorded.
            RateLimitError: If the user exhausted the window budget. Nothing
                is persisted.
            SQLAlchemyError: If the insert fails; the rate limit slot taken
                for this post is released first.
        """
        async with self.session_maker() as session:
            # Step 1: the user must exist
            owner = await session.scalar(select(User.id).where(User.id == user_id))
            if owner is None:
                raise user_not_found(user_id, POST_USER_NOT_FOUND)

            # Step 2: check-and-record, with no await in between
            now = self.clock()
            result = self.rate_limiter.consume(user_id, now=now)
            if not result.allowed:
                logger.warning(
                    "rate_limit.exceeded",
                    extra={
                        "user_id": user_id,
                        "limit": result.limit,
                        "window_s": self.rate_limiter.window_seconds,
                        "retry_after_s": result.retry_after_seconds,
                    },
                )
                raise rate_limit_exceeded(
                    user_id,
                    limit=result.limit,
                    window_seconds=self.rate_limiter.window_seconds,
                    retry_after=result.retry_after_seconds,
                )

            # Step 3: persist
            message = Message(
                id=new_id(),
                user_id=user_id,
                body=body,
                creation_date=utc_now_iso(),
            )
            session.add(message)
            try:
                await session.commit()
            except SQLAlchemyError:
                # The post was not stored, give the slot back
                self.rate_limiter.release(user_id, now)
                logger.warning(
                    "message.persist_failed",
                    extra={"user_id": user_id, "message_id": message.id},
                )
                raise

        logger.info(
            "message.posted",
            extra={
                "user_id": user_id,
                "message_id": message.id,
                "remaining": result.remaining,
            },
        )
        return message

    async def list_all_messages(self) -> list[Message]:
        """Return every message, oldest first."""
        async with self.session_maker() as session:
            result = await session.scalars(select(Message).order_by(*_CHRONOLOGICAL))
            return list(result)

    async def list_messages_for_user(self, user_id: str) -> list[Message]:
        """Return the messages of one user, oldest first.

        Raises:
            NotFoundError: If no user has this id.
        """
        async with self.session_maker() as session:
            owner = await session.scalar(select(User.id).where(User.id == user_id))
            if owner is None:
                raise user_not_found(user_id)
            return await self._messages_of(session, user_id)

    async def siblings(self, message: Message) -> tuple[Message | None, Message | None]:
        """Return the (previous, next) messages of the same user.

        Neighbours are taken from the user's messages in creation order;
        either side is None at the boundaries (both for a lone message).
        """
        async with self.session_maker() as session:
            ordered = await self._messages_of(session, message.user_id)

        position = next(
            (i for i, candidate in enumerate(ordered) if candidate.id == message.id),
            None,
        )
        if position is None:
            return None, None

        previous = ordered[position - 1] if position > 0 else None
        following = ordered[position + 1] if position < len(ordered) - 1 else None
        return previous, following

    async def previous_message(self, message: Message) -> Message | None:
        return (await self.siblings(message))[0]

    async def next_message(self, message: Message) -> Message | None:
        return (await self.siblings(message))[1]

    @staticmethod
    async def _messages_of(session: AsyncSession, user_id: str) -> list[Message]:
        result = await session.scalars(
            select(Message).where(Message.user_id == user_id).order_by(*_CHRONOLOGICAL)
        )
        return list(result)

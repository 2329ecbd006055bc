"""GraphQL object types for users and messages."""

from __future__ import annotations

from typing import NewType

import strawberry
from strawberry.types import Info

from message_board.api.graphql.context import GraphQLContext
from message_board.core.errors import user_not_found
from message_board.db.models import Message, User

# ISO-8601 UTC timestamp, exposed as the `Date` scalar (see schema.py)
Date = NewType("Date", str)


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    name: str
    email: str
    creation_date: Date

    @strawberry.field(description="Number of messages posted by this user.")
    async def number_of_posts(self, info: Info[GraphQLContext, None]) -> int:
        return await info.context.users.count_messages(self.id)

    @classmethod
    def from_model(cls, user: User) -> UserType:
        return cls(
            id=strawberry.ID(user.id),
            name=user.name,
            email=user.email,
            creation_date=user.creation_date,
        )


@strawberry.type(name="Message")
class MessageType:
    id: strawberry.ID
    body: str
    creation_date: Date
    model: strawberry.Private[Message]

    @strawberry.field
    async def user(self, info: Info[GraphQLContext, None]) -> UserType:
        owner = await info.context.users.get_user(self.model.user_id)
        if owner is None:
            raise user_not_found(self.model.user_id)
        return UserType.from_model(owner)

    @strawberry.field(description="The same user's message posted right before this one.")
    async def previous_posted_message(
        self, info: Info[GraphQLContext, None]
    ) -> MessageType | None:
        previous = await info.context.messages.previous_message(self.model)
        return MessageType.from_model(previous) if previous is not None else None

    @strawberry.field(description="The same user's message posted right after this one.")
    async def next_posted_message(
        self, info: Info[GraphQLContext, None]
    ) -> MessageType | None:
        following = await info.context.messages.next_message(self.model)
        return MessageType.from_model(following) if following is not None else None

    @classmethod
    def from_model(cls, message: Message) -> MessageType:
        return cls(
            id=strawberry.ID(message.id),
            body=message.body,
            creation_date=message.creation_date,
            model=message,
        )

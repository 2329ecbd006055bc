"""GraphQL schema: queries, mutations and the FastAPI router serving them."""

from __future__ import annotations

from typing import Any

import strawberry
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.schema.config import StrawberryConfig
from strawberry.types import Info

from message_board.api.graphql.context import GraphQLContext, get_context
from message_board.api.graphql.error_reporting import MaskUnexpectedErrors, report_error
from message_board.api.graphql.types import Date, MessageType, UserType


@strawberry.type
class Query:
    @strawberry.field
    async def list_users(self, info: Info[GraphQLContext, None]) -> list[UserType] | None:
        users = await info.context.users.list_users()
        return [UserType.from_model(user) for user in users]

    @strawberry.field(description="All messages, oldest first.")
    async def list_all_messages(
        self, info: Info[GraphQLContext, None]
    ) -> list[MessageType] | None:
        messages = await info.context.messages.list_all_messages()
        return [MessageType.from_model(message) for message in messages]

    @strawberry.field(description="Messages of one user, oldest first.")
    async def list_messages_for_user(
        self, info: Info[GraphQLContext, None], user_id: strawberry.ID
    ) -> list[MessageType] | None:
        messages = await info.context.messages.list_messages_for_user(str(user_id))
        return [MessageType.from_model(message) for message in messages]


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_user(
        self, info: Info[GraphQLContext, None], name: str, email: str
    ) -> UserType | None:
        user = await info.context.users.create_user(name, email)
        return UserType.from_model(user)

    @strawberry.mutation
    async def post_message(
        self, info: Info[GraphQLContext, None], user_id: strawberry.ID, message_body: str
    ) -> MessageType | None:
        message = await info.context.messages.post_message(str(user_id), message_body)
        return MessageType.from_model(message)


class MessageBoardSchema(strawberry.Schema):
    def process_errors(self, errors: list[GraphQLError], execution_context: Any = None) -> None:
        # Runs before masking, so original exceptions are still attached
        for error in errors:
            report_error(error)


schema = MessageBoardSchema(
    query=Query,
    mutation=Mutation,
    extensions=[MaskUnexpectedErrors()],
    config=StrawberryConfig(
        scalar_map={
            Date: strawberry.scalar(
                name="Date",
                description="ISO-8601 UTC timestamp, e.g. 2024-01-31T12:00:00.000000Z",
                serialize=str,
                parse_value=str,
            )
        }
    ),
)


def create_graphql_router(*, graphql_ide: bool = True) -> GraphQLRouter:
    """Build the router serving the schema at the application root."""

    return GraphQLRouter(
        schema,
        path="/",
        context_getter=get_context,
        graphql_ide="graphiql" if graphql_ide else None,
    )

from __future__ import annotations

from fastapi import Request
from strawberry.fastapi import BaseContext

from message_board.services.message_service import MessageService
from message_board.services.user_service import UserService


class GraphQLContext(BaseContext):
    """Per-request context handed to every resolver."""

    def __init__(self, users: UserService, messages: MessageService) -> None:
        super().__init__()
        self.users = users
        self.messages = messages


async def get_context(request: Request) -> GraphQLContext:
    """Build the resolver context from the services held on ``app.state``."""

    return GraphQLContext(
        users=request.app.state.user_service,
        messages=request.app.state.message_service,
    )

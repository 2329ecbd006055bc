from __future__ import annotations

from message_board.api.routes.health import router as health_router

__all__ = ["health_router"]

"""Logging and masking of resolver errors.

Domain errors (AppError) reach the client unchanged: the literal message plus
``extensions.code``. Any other exception raised by a resolver is logged with
its traceback and replaced by a generic message.
"""

from __future__ import annotations

import logging

from graphql import GraphQLError
from strawberry.extensions import MaskErrors

from message_board.core.errors import AppError

logger = logging.getLogger(__name__)

MASKED_ERROR_MESSAGE = "Unexpected error."


def is_unexpected(error: GraphQLError) -> bool:
    """Resolver failures other than domain errors; parse/validation errors stay visible."""
    original = error.original_error
    return original is not None and not isinstance(original, AppError)


class MaskUnexpectedErrors(MaskErrors):
    """MaskErrors that also tags masked errors with ``internal_server_error``."""

    def __init__(self) -> None:
        super().__init__(should_mask_error=is_unexpected, error_message=MASKED_ERROR_MESSAGE)

    def anonymise_error(self, error: GraphQLError) -> GraphQLError:
        masked = super().anonymise_error(error)
        masked.extensions = {"code": "internal_server_error"}
        return masked


def report_error(error: GraphQLError) -> None:
    """Log one execution error at a level matching its kind."""
    original = error.original_error
    path = ".".join(str(p) for p in error.path or ())

    if original is None:
        logger.info("graphql.request_error", extra={"error_msg": error.message, "path": path})
    elif isinstance(original, AppError):
        logger.warning(
            "graphql.app_error",
            extra={
                "error_code": original.code,
                "error_message": original.message,
                "path": path,
            },
        )
    else:
        logger.error(
            "graphql.unhandled_exception",
            exc_info=(type(original), original, original.__traceback__),
            extra={"error_type": type(original).__name__, "path": path},
        )

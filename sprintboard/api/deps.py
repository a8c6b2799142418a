from uuid import UUID

from fastapi import Header

from sprintboard.db import get_db  # noqa: F401
from sprintboard.errors import InvalidArgumentError


def get_current_user_id(x_user_id: str = Header(alias="X-User-Id")) -> UUID:
    """Return the calling user's id from the ``X-User-Id`` header."""
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise InvalidArgumentError("X-User-Id header must be a UUID") from exc

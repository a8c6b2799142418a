import enum
import re
import uuid
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from sprintboard.errors import InvalidArgumentError, NotFoundError

E = TypeVar("E", bound=enum.Enum)
M = TypeVar("M")

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def coerce_uuid(value: Any) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError) as exc:
        raise InvalidArgumentError(f"Invalid UUID '{value}'") from exc


def validate_enum(value: Any, enum_cls: type[E], label: str) -> E | None:
    """Convert ``value`` to a member of ``enum_cls`` by value or by name."""
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str):
        key = value.strip()
        for member in enum_cls:
            if member.name.lower() == key.lower() or str(member.value).lower() == key.lower():
                return member
    raise InvalidArgumentError(f"Invalid {label}")


def slugify(value: str) -> str:
    return _SLUG_STRIP.sub("-", value.lower()).strip("-")


def get_or_404(db: Session, model: type[M], item_id: Any, label: str | None = None) -> M:
    label = label or model.__name__
    item = db.get(model, item_id)
    if item is None:
        raise NotFoundError(f"{label} not found")
    return item

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sprintboard.config import settings
from sprintboard.queries.search import calculate_pagination_meta
from sprintboard.services.filter_contract import FilterRule

T = TypeVar("T")


class SortSpec(BaseModel):
    field: str = Field(min_length=1)
    order: Literal["ASC", "DESC"] = "ASC"

    @field_validator("order", mode="before")
    @classmethod
    def _normalize_order(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class SearchRequest(BaseModel):
    """Body of every ``POST .../search`` endpoint.

    ``filters`` takes either an object (``{"status": "TODO"}``) or an array
    of filter rules. ``take`` is left unset so each entity can apply its own
    default page size.
    """

    model_config = ConfigDict(populate_by_name=True)

    search: str | None = None
    sort_by: list[SortSpec] = Field(default_factory=list, alias="sortBy")
    filters: list[FilterRule] | dict[str, Any] | None = None
    skip: int = Field(default=0, ge=0)
    take: int | None = Field(default=None, ge=1, le=settings.search_max_take)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _lift_single_sort(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (dict, SortSpec)):
            return [value]
        return value


class Page(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    items: list[T]
    total: int
    skip: int
    take: int
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    @classmethod
    def create(cls, items: Sequence[T], total: int, skip: int, take: int) -> Page[T]:
        meta = calculate_pagination_meta(total, skip, take)
        return cls(
            items=list(items),
            total=meta.total,
            skip=meta.skip,
            take=meta.take,
            has_next=meta.has_next,
            has_prev=meta.has_prev,
        )

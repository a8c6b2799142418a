"""Storage-agnostic search query construction.

Turns the parts of a search request (free-text term, filters, sort list)
into a :class:`SearchPredicate` and an ordering, and computes pagination
metadata for a result page. Everything here is pure: no I/O, no shared
state, inputs are never mutated.

Usage:
    predicate = SearchPredicate(text=build_search_conditions("auth", ["title", "description"]))
    predicate = apply_filters(predicate, {"status": "TODO"}, TICKET_FIELDS)
    predicate = with_scope(predicate, {"project_id": 7})
    ordering = build_sort_options([{"field": "createdAt", "order": "DESC"}], TICKET_FIELDS)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, NamedTuple

from sprintboard.errors import InvalidArgumentError
from sprintboard.services.filter_contract import (
    FilterExpression,
    FilterRule,
    legacy_filter_rules,
    parse_filter_rule,
)

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")


class SortKey(NamedTuple):
    column: str
    direction: str


DEFAULT_ORDERING: tuple[SortKey, ...] = (SortKey("created_at", "desc"),)


@dataclass(frozen=True)
class TextSearch:
    """OR of case-insensitive substring matches of ``term`` over ``fields``."""

    term: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class SearchPredicate:
    """AND of a scope constraint, an optional text search and filter nodes.

    Scope columns always win: filters that target a scope column are
    dropped when the two are merged.
    """

    scope: Mapping[str, Any] = field(default_factory=dict)
    text: TextSearch | None = None
    filters: tuple[FilterExpression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "scope", MappingProxyType(dict(self.scope)))
        object.__setattr__(self, "filters", tuple(self.filters))

    def replace(self, **changes: Any) -> SearchPredicate:
        values = {"scope": self.scope, "text": self.text, "filters": self.filters}
        values.update(changes)
        return SearchPredicate(**values)


@dataclass(frozen=True)
class PaginationMeta:
    total: int
    skip: int
    take: int
    has_next: bool
    has_prev: bool


def map_field(name: str, field_mapping: Mapping[str, str] | None) -> str:
    if field_mapping:
        return field_mapping.get(name, name)
    return name


def build_search_conditions(term: str | None, searchable_fields: Sequence[str]) -> TextSearch | None:
    """Build the free-text part of a predicate.

    Returns ``None`` (no constraint) for an absent or blank term. The OR
    branches keep the order of ``searchable_fields``.
    """
    if term is None:
        return None
    cleaned = term.strip()
    if not cleaned:
        return None
    if not searchable_fields:
        raise ValueError("searchable_fields must not be empty")
    return TextSearch(term=cleaned, fields=tuple(searchable_fields))


def _filter_rules(filters: Mapping[str, Any] | Sequence[Any]) -> list[FilterRule]:
    if isinstance(filters, Mapping):
        rules: list[FilterRule] = []
        for key, value in filters.items():
            rules.extend(legacy_filter_rules(str(key), value))
        return rules
    if isinstance(filters, (str, bytes)) or not isinstance(filters, Sequence):
        raise InvalidArgumentError("filters must be an object or an array of filter rules.")
    return [parse_filter_rule(rule) for rule in filters]


def _drop_scope_collisions(
    nodes: Sequence[FilterExpression], scope: Mapping[str, Any]
) -> tuple[FilterExpression, ...]:
    kept = []
    for node in nodes:
        if node.field in scope:
            logger.warning("search_filter_dropped_scope_collision field=%s", node.field)
            continue
        kept.append(node)
    return tuple(kept)


def apply_filters(
    base: SearchPredicate,
    filters: Mapping[str, Any] | Sequence[Any] | None,
    field_mapping: Mapping[str, str] | None = None,
) -> SearchPredicate:
    """Merge caller filters into ``base`` and return a new predicate.

    Both shapes are accepted: an object (``{"status": "TODO"}``) or a rule
    array (``[{"field": "status", "operator": "in", "value": [...]}]``).
    A column constrained by ``filters`` replaces whatever ``base`` had on
    that column; several rules on one column in the same call all apply.
    """
    if not filters:
        return base

    nodes = [rule.to_expression(map_field(rule.field, field_mapping)) for rule in _filter_rules(filters)]
    nodes = _drop_scope_collisions(nodes, base.scope)
    touched = {node.field for node in nodes}
    retained = tuple(node for node in base.filters if node.field not in touched)
    return base.replace(filters=retained + nodes)


def with_scope(predicate: SearchPredicate, scope: Mapping[str, Any]) -> SearchPredicate:
    """Apply ``scope`` last so that it wins any collision with filters."""
    merged = {**predicate.scope, **scope}
    return predicate.replace(
        scope=merged,
        filters=_drop_scope_collisions(predicate.filters, merged),
    )


def _sort_parts(entry: Any) -> tuple[str, Any]:
    if isinstance(entry, Mapping):
        return entry.get("field"), entry.get("order", "ASC")
    return getattr(entry, "field", None), getattr(entry, "order", "ASC")


def build_sort_options(
    sort_specs: Any,
    field_mapping: Mapping[str, str] | None = None,
) -> tuple[SortKey, ...]:
    """Build an ordering from a list of ``{field, order}`` specs.

    Every spec is applied, in order. With nothing to sort on the default
    ordering ``created_at desc`` is returned.
    """
    if not sort_specs:
        return DEFAULT_ORDERING
    if isinstance(sort_specs, Mapping) or hasattr(sort_specs, "field"):
        sort_specs = [sort_specs]

    ordering: list[SortKey] = []
    seen: set[str] = set()
    for spec in sort_specs:
        name, order = _sort_parts(spec)
        if not name:
            raise InvalidArgumentError("Sort option requires a field.")
        direction = str(getattr(order, "value", order) or "asc").lower()
        if direction not in SORT_DIRECTIONS:
            raise InvalidArgumentError(f"Invalid sort order '{order}'. Use ASC or DESC.")
        column = map_field(str(name), field_mapping)
        if column in seen:
            continue
        seen.add(column)
        ordering.append(SortKey(column, direction))
    return tuple(ordering) or DEFAULT_ORDERING


def calculate_pagination_meta(total: int, skip: int, take: int) -> PaginationMeta:
    return PaginationMeta(
        total=total,
        skip=skip,
        take=take,
        has_next=skip + take < total,
        has_prev=skip > 0,
    )

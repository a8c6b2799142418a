"""Search composition shared by every entity search endpoint.

``run_search`` turns a :class:`SearchRequest` into a predicate and an
ordering, runs the page query and the count on the same predicate, and
returns a :class:`Page` of read schemas.
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sprintboard.errors import InternalError, InvalidArgumentError, ServiceError, format_validation_errors
from sprintboard.observability import (
    SEARCH_COMPLETED,
    SEARCH_FAILED,
    SEARCH_PREDICATE_BUILT,
    SEARCH_RECEIVED,
    SearchEvent,
    SearchObserver,
    default_observer,
)
from sprintboard.queries.base import BaseQuery
from sprintboard.queries.search import (
    SearchPredicate,
    apply_filters,
    build_search_conditions,
    build_sort_options,
    with_scope,
)
from sprintboard.schemas.search import Page, SearchRequest
from sprintboard.services.filter_contract import FilterExpression
from sprintboard.telemetry import get_tracer

tracer = get_tracer(__name__)


def parse_search_request(request: SearchRequest | Mapping[str, Any] | None) -> SearchRequest:
    if request is None:
        return SearchRequest()
    if isinstance(request, SearchRequest):
        return request
    try:
        return SearchRequest.model_validate(dict(request))
    except ValidationError as exc:
        raise InvalidArgumentError(format_validation_errors(exc)) from exc


def build_predicate(
    request: SearchRequest,
    query_cls: type[BaseQuery],
    scope: Mapping[str, Any],
    default_filters: Sequence[FilterExpression] = (),
) -> SearchPredicate:
    """Text search first, then caller filters, then the scope.

    ``default_filters`` seed the predicate; a caller filter on the same
    column replaces them.
    """
    predicate = SearchPredicate(
        text=build_search_conditions(request.search, query_cls.searchable_fields),
        filters=tuple(default_filters),
    )
    predicate = apply_filters(predicate, request.filters, query_cls.field_mapping)
    return with_scope(predicate, scope)


def run_search(
    db: Session,
    query_cls: type[BaseQuery],
    read_schema: type[BaseModel],
    *,
    entity: str,
    scope: Mapping[str, Any],
    request: SearchRequest | Mapping[str, Any] | None,
    default_take: int,
    default_filters: Sequence[FilterExpression] = (),
    base_query: BaseQuery | None = None,
    options: Sequence[Any] = (),
    observer: SearchObserver | None = None,
) -> Page:
    """Run one paged search.

    ``base_query`` is an already constrained ``query_cls`` instance (for
    example row visibility); its constraints are AND-ed with the predicate.
    """
    observer = observer or default_observer
    start = time.perf_counter()

    try:
        request = parse_search_request(request)
    except InvalidArgumentError as exc:
        observer.emit(SearchEvent(SEARCH_FAILED, entity, {"outcome": "invalid", "error": exc.detail}))
        raise

    skip = request.skip
    take = request.take or default_take
    observer.emit(
        SearchEvent(
            SEARCH_RECEIVED,
            entity,
            {"skip": skip, "take": take, "has_search": bool(request.search and request.search.strip())},
        )
    )

    with tracer.start_as_current_span("search.run") as span:
        span.set_attribute("search.entity", entity)
        try:
            predicate = build_predicate(request, query_cls, scope, default_filters)
            ordering = build_sort_options(request.sort_by, query_cls.field_mapping)
            observer.emit(
                SearchEvent(
                    SEARCH_PREDICATE_BUILT,
                    entity,
                    {
                        "filters": len(predicate.filters),
                        "ordering": ",".join(f"{key.column}:{key.direction}" for key in ordering),
                    },
                )
            )

            # One session serves both reads; Session objects are not safe
            # for concurrent use.
            query = base_query if base_query is not None else query_cls(db)
            filtered = query.where(predicate)
            total = filtered.count()
            rows = filtered.with_options(*options).order_by(ordering).paginate(take, skip).all()
        except ServiceError as exc:
            observer.emit(SearchEvent(SEARCH_FAILED, entity, {"outcome": "invalid", "error": exc.detail}))
            raise
        except SQLAlchemyError as exc:
            observer.emit(SearchEvent(SEARCH_FAILED, entity, {"outcome": "error", "error": type(exc).__name__}))
            raise InternalError(f"Search over {entity} failed") from exc

        span.set_attribute("search.total", total)

    page = Page[read_schema].create(
        [read_schema.model_validate(row) for row in rows],
        total=total,
        skip=skip,
        take=take,
    )
    observer.emit(
        SearchEvent(
            SEARCH_COMPLETED,
            entity,
            {
                "total": total,
                "returned": len(page.items),
                "duration_seconds": round(time.perf_counter() - start, 6),
            },
        )
    )
    return page

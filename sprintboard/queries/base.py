"""Base query builder class.

Provides common query operations that all query builders inherit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, Self, TypeVar

from sqlalchemy import inspect
from sqlalchemy.orm import Query

from sprintboard.queries.search import SearchPredicate, SortKey
from sprintboard.services.filter_engine import apply_predicate, compile_ordering

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseQuery(Generic[T]):
    """Base class for composable query builders.

    Provides fluent interface for building SQLAlchemy queries with:
    - Search predicates and orderings from the search query layer
    - Pagination
    - Count operations

    Subclasses should:
    1. Set `model_class` to the SQLAlchemy model
    2. Define `searchable_fields` for free-text search
    3. Define `field_mapping` from request field names to model columns
    """

    model_class: type[T]
    searchable_fields: ClassVar[tuple[str, ...]] = ()
    field_mapping: ClassVar[dict[str, str]] = {}

    def __init__(self, db: Session):
        self.db = db
        self._query: Query = db.query(self.model_class)

    def _clone(self) -> Self:
        """Create a copy of this query builder with current state."""
        new = self.__class__.__new__(self.__class__)
        new.db = self.db
        new._query = self._query
        return new

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def where(self, predicate: SearchPredicate) -> Self:
        """Constrain the query by a search predicate."""
        clone = self._clone()
        clone._query = apply_predicate(clone._query, self.model_class, predicate)
        return clone

    def with_options(self, *options: Any) -> Self:
        """Attach loader options (eager loading)."""
        if not options:
            return self
        clone = self._clone()
        clone._query = clone._query.options(*options)
        return clone

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def order_by(self, ordering: tuple[SortKey, ...]) -> Self:
        """Apply an ordering; earlier keys take precedence.

        The primary key is appended ascending so ties never reorder
        between pages.
        """
        clone = self._clone()
        clauses = compile_ordering(self.model_class, ordering)
        sorted_columns = {key.column for key in ordering}
        for column in inspect(self.model_class).primary_key:
            if column.key not in sorted_columns:
                clauses.append(getattr(self.model_class, column.key).asc())
        clone._query = clone._query.order_by(*clauses)
        return clone

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------

    def paginate(self, limit: int = 50, offset: int = 0) -> Self:
        """Apply pagination to the query."""
        clone = self._clone()
        if limit > 0:
            clone._query = clone._query.limit(limit)
        if offset > 0:
            clone._query = clone._query.offset(offset)
        return clone

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def all(self) -> list[T]:
        """Execute query and return all results."""
        return self._query.all()

    def count(self) -> int:
        """Return count of matching records."""
        return self._query.count()


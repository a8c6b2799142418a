from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from sqlalchemy import Enum as SAEnum
from sqlalchemy import and_, inspect, or_
from sqlalchemy.orm import InstrumentedAttribute

from sprintboard.errors import InvalidArgumentError
from sprintboard.services.common import coerce_uuid, validate_enum
from sprintboard.services.filter_contract import Contains, Equals, FilterExpression, In, NotEquals, Range

if TYPE_CHECKING:
    from sprintboard.queries.search import SearchPredicate, SortKey

_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no"}


def _parse_datetime_like(value: Any) -> date | datetime:
    if isinstance(value, (date, datetime)):
        return value
    if not isinstance(value, str):
        raise ValueError("Date/datetime value must be a valid ISO-8601 string.")
    if len(value) <= 10:
        return date.fromisoformat(value)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _column(model, name: str) -> InstrumentedAttribute:
    prop = inspect(model).column_attrs.get(name)
    if prop is None:
        raise InvalidArgumentError(f"Field '{name}' is not queryable on '{model.__name__}'.")
    return getattr(model, name)


def _python_type(column: InstrumentedAttribute) -> type | None:
    try:
        return column.property.columns[0].type.python_type
    except NotImplementedError:
        return None


def _coerce(column: InstrumentedAttribute, name: str, value: Any) -> Any:
    if value is None:
        return None
    sa_type = column.property.columns[0].type
    if isinstance(sa_type, SAEnum) and sa_type.enum_class is not None:
        return validate_enum(value, sa_type.enum_class, name)

    python_type = _python_type(column)
    try:
        if python_type is datetime:
            parsed = _parse_datetime_like(value)
            if not isinstance(parsed, datetime):
                parsed = datetime(parsed.year, parsed.month, parsed.day)
            return parsed
        if python_type is date:
            parsed = _parse_datetime_like(value)
            return parsed.date() if isinstance(parsed, datetime) else parsed
        if python_type is bool:
            if isinstance(value, bool):
                return value
            lowered = str(value).strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise ValueError("Boolean field requires a boolean value.")
        if python_type is int:
            if isinstance(value, bool):
                raise ValueError("Integer field requires a numeric value.")
            return int(value)
        if python_type is Decimal:
            if isinstance(value, bool):
                raise ValueError("Number field requires a numeric value.")
            return Decimal(str(value))
        if python_type is float:
            return float(value)
        if python_type is uuid.UUID:
            return coerce_uuid(value)
        if python_type is str and not isinstance(value, str):
            return str(value)
    except (ValueError, TypeError, InvalidOperation) as exc:
        raise InvalidArgumentError(f"Invalid value '{value}' for field '{name}'.") from exc
    return value


def _build_filter(model, node: FilterExpression):
    column = _column(model, node.field)

    if isinstance(node, Equals):
        value = _coerce(column, node.field, node.value)
        return column.is_(None) if value is None else column == value
    if isinstance(node, NotEquals):
        value = _coerce(column, node.field, node.value)
        return column.is_not(None) if value is None else column != value
    if isinstance(node, In):
        return column.in_([_coerce(column, node.field, item) for item in node.values])
    if isinstance(node, Contains):
        sa_type = column.property.columns[0].type
        if isinstance(sa_type, SAEnum) or _python_type(column) is not str:
            raise InvalidArgumentError(f"Operator 'contains' requires a text field; '{node.field}' is not one.")
        if node.case_insensitive:
            return column.icontains(node.value, autoescape=True)
        return column.contains(node.value, autoescape=True)
    if isinstance(node, Range):
        bounds = []
        if node.gte is not None:
            bounds.append(column >= _coerce(column, node.field, node.gte))
        if node.lte is not None:
            bounds.append(column <= _coerce(column, node.field, node.lte))
        return and_(*bounds)
    raise InvalidArgumentError(f"Unsupported filter expression '{type(node).__name__}'.")


def compile_predicate(model, predicate: SearchPredicate) -> list:
    """Compile ``predicate`` into SQLAlchemy clauses for ``model``.

    Filters come first and scope last; the clauses are AND-ed by the caller.
    """
    clauses = []
    if predicate.text is not None:
        term = predicate.text.term
        clauses.append(
            or_(*[_column(model, name).icontains(term, autoescape=True) for name in predicate.text.fields])
        )
    for node in predicate.filters:
        clauses.append(_build_filter(model, node))
    for name, value in predicate.scope.items():
        column = _column(model, name)
        coerced = _coerce(column, name, value)
        clauses.append(column.is_(None) if coerced is None else column == coerced)
    return clauses


def compile_ordering(model, ordering: tuple[SortKey, ...]) -> list:
    clauses = []
    for key in ordering:
        column = _column(model, key.column)
        clauses.append(column.desc() if key.direction == "desc" else column.asc())
    return clauses


def apply_predicate(query, model, predicate: SearchPredicate):
    clauses = compile_predicate(model, predicate)
    if not clauses:
        return query
    return query.filter(and_(*clauses))

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from sprintboard.errors import InvalidArgumentError

Operator = Literal["equals", "in", "contains", "gte", "lte", "between", "notEquals"]
OPERATORS: frozenset[str] = frozenset(get_args(Operator))


# Filter expression nodes. Each targets one storage column.


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class NotEquals:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class Contains:
    field: str
    value: str
    case_insensitive: bool = True


@dataclass(frozen=True)
class Range:
    field: str
    gte: Any = None
    lte: Any = None


FilterExpression = Equals | NotEquals | In | Contains | Range


class FilterRule(BaseModel):
    model_config = ConfigDict(extra="forbid")

    field: str = Field(min_length=1)
    operator: Operator
    value: Any = None

    @model_validator(mode="after")
    def validate_rule(self) -> FilterRule:
        operator = self.operator
        value = self.value

        if operator == "in":
            if not isinstance(value, list) or not value:
                raise ValueError("Operator 'in' requires a non-empty array value.")
            return self

        if operator == "between":
            if not isinstance(value, list) or len(value) != 2:
                raise ValueError("Operator 'between' requires a two-item array value.")
            if value[0] is None and value[1] is None:
                raise ValueError("Operator 'between' requires at least one bound.")
            return self

        if isinstance(value, (list, dict)):
            raise ValueError(f"Operator '{operator}' requires a scalar value.")

        if operator == "contains" and not isinstance(value, str):
            raise ValueError("Operator 'contains' requires a string value.")

        if operator in {"gte", "lte"} and value is None:
            raise ValueError(f"Operator '{operator}' requires a value.")

        return self

    def to_expression(self, column: str) -> FilterExpression:
        """Translate the rule into a node bound to ``column``."""
        op = self.operator
        value = self.value
        if op == "equals":
            return Equals(column, value)
        if op == "notEquals":
            return NotEquals(column, value)
        if op == "in":
            return In(column, tuple(value))
        if op == "contains":
            return Contains(column, value)
        if op == "gte":
            return Range(column, gte=value)
        if op == "lte":
            return Range(column, lte=value)
        return Range(column, gte=value[0], lte=value[1])


def parse_filter_rule(raw: FilterRule | Mapping[str, Any]) -> FilterRule:
    if isinstance(raw, FilterRule):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError("Each filter rule must be an object with field, operator and value.")
    try:
        return FilterRule.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidArgumentError(_describe_validation_error(exc)) from exc


def legacy_filter_rules(field: str, value: Any) -> list[FilterRule]:
    """Lift one ``{field: value}`` entry of an object-style filter into rules.

    Scalars become ``equals``, lists become ``in`` and marker objects such as
    ``{"in": [...]}`` or ``{"gte": 1, "lte": 5}`` name their operators directly.
    """
    if isinstance(value, Mapping):
        if not value:
            raise InvalidArgumentError(f"Filter '{field}' has an empty operator object.")
        unknown = [key for key in value if key not in OPERATORS]
        if unknown:
            raise InvalidArgumentError(f"Unsupported filter operator '{unknown[0]}' for field '{field}'.")
        return [parse_filter_rule({"field": field, "operator": op, "value": val}) for op, val in value.items()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [parse_filter_rule({"field": field, "operator": "in", "value": list(value)})]
    return [parse_filter_rule({"field": field, "operator": "equals", "value": value})]


def _describe_validation_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid filter rule."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    if first.get("type") == "literal_error" and location == "operator":
        return f"Unsupported filter operator '{first.get('input')}'."
    return f"Invalid filter rule: {location}: {message}" if location else f"Invalid filter rule: {message}"

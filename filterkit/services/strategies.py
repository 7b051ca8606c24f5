from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel

from filterkit.services.predicates import Predicate

Kind = Literal["membership", "partial_match", "equality", "range", "boolean"]

_UNSET = object()


@dataclass(frozen=True)
class FieldStrategy:
    """How one criteria field (two for ranges) constrains record columns."""

    kind: Kind
    source: str
    columns: Tuple[str, ...]
    upper_source: Optional[str] = None

    def to_predicate(self, criteria: BaseModel) -> Predicate:
        value = _criteria_value(criteria, self.source)
        if self.kind == "membership":
            if value is _UNSET or not value:
                return Predicate.always()
            return Predicate.of("in", self.columns[0], value=tuple(value))
        if self.kind == "partial_match":
            text = "" if value is _UNSET or value is None else str(value).strip()
            if not text:
                return Predicate.always()
            return Predicate.of("ilike", *self.columns, value=text)
        if self.kind in {"equality", "boolean"}:
            if value is _UNSET or value is None:
                return Predicate.always()
            return Predicate.of("eq", self.columns[0], value=value)
        if self.kind == "range":
            lower = None if value is _UNSET else value
            upper = _criteria_value(criteria, self.upper_source) if self.upper_source else None
            upper = None if upper is _UNSET else upper
            column = self.columns[0]
            if lower is not None and upper is not None:
                return Predicate.of("between", column, value=lower, upper=upper)
            if lower is not None:
                return Predicate.of("gte", column, value=lower)
            if upper is not None:
                return Predicate.of("lte", column, value=upper)
            return Predicate.always()
        raise ValueError(f"Unknown strategy kind: {self.kind}")


def _criteria_value(criteria: BaseModel, name: str) -> Any:
    value = getattr(criteria, name, _UNSET)
    if isinstance(value, str) and not value.strip():
        return None
    return value


def membership(source: str, column: str) -> FieldStrategy:
    return FieldStrategy(kind="membership", source=source, columns=(column,))


def partial_match(source: str, column: str, *more_columns: str) -> FieldStrategy:
    return FieldStrategy(kind="partial_match", source=source, columns=(column, *more_columns))


def equality(source: str, column: str) -> FieldStrategy:
    return FieldStrategy(kind="equality", source=source, columns=(column,))


def boolean(source: str, column: str) -> FieldStrategy:
    return FieldStrategy(kind="boolean", source=source, columns=(column,))


def value_range(lower_source: str, upper_source: str, column: str) -> FieldStrategy:
    return FieldStrategy(kind="range", source=lower_source, columns=(column,), upper_source=upper_source)


def default_strategies(
    *,
    id_column: str = "id",
    text_columns: Tuple[str, ...] = ("name",),
    code_column: str = "code",
    status_column: str = "status",
    related_column: Optional[str] = None,
    flag_column: Optional[str] = None,
    created_column: str = "created_at",
) -> Tuple[FieldStrategy, ...]:
    """Strategies binding every standard FilterCriteria field to conventional column names."""
    items = [
        membership("ids", id_column),
        partial_match("text", *text_columns),
        equality("code", code_column),
        equality("status", status_column),
        value_range("created_after", "created_before", created_column),
    ]
    if related_column:
        items.append(equality("related_id", related_column))
        items.append(membership("related_ids", related_column))
    if flag_column:
        items.append(boolean("flag", flag_column))
    return tuple(items)

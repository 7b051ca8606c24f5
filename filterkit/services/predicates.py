from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Tuple

from filterkit.schemas.criteria import coerce_tri_state

Op = Literal["not_deleted", "eq", "in", "ilike", "gte", "lte", "between"]

MISSING = object()


@dataclass(frozen=True)
class Condition:
    op: Op
    columns: Tuple[str, ...]
    value: Any = None
    upper: Any = None


@dataclass(frozen=True)
class Predicate:
    """AND of conditions. The empty predicate matches every record."""

    conditions: Tuple[Condition, ...] = ()

    @classmethod
    def always(cls) -> "Predicate":
        return cls()

    @classmethod
    def of(cls, op: Op, *columns: str, value: Any = None, upper: Any = None) -> "Predicate":
        return cls((Condition(op=op, columns=tuple(columns), value=value, upper=upper),))

    def __and__(self, other: "Predicate") -> "Predicate":
        if not isinstance(other, Predicate):
            return NotImplemented
        return Predicate(self.conditions + other.conditions)

    @property
    def is_identity(self) -> bool:
        return not self.conditions

    def matches(self, record: Any) -> bool:
        return all(condition_matches(c, record) for c in self.conditions)


def not_deleted(column: str) -> Predicate:
    return Predicate.of("not_deleted", column)


def read_field(record: Any, column: str):
    if isinstance(record, dict):
        return record.get(column, MISSING)
    return getattr(record, column, MISSING)


def _ilike(value: Any, needle: str) -> bool:
    if value is MISSING or value is None:
        return False
    return needle.lower() in str(value).lower()


def _enum_member(enum_cls, raw: Any) -> Any:
    if isinstance(raw, enum_cls):
        return raw
    key = raw.strip() if isinstance(raw, str) else raw
    if isinstance(key, str) and key in enum_cls.__members__:
        return enum_cls[key]
    try:
        return enum_cls(key)
    except ValueError:
        return raw


def _like(sample: Any, raw: Any) -> Any:
    """Convert a query-string value to the type of the record value it is compared with."""
    if isinstance(sample, enum.Enum):
        # Enum records match by member name or value.
        return _enum_member(type(sample), raw)
    if not isinstance(raw, str) or isinstance(sample, str):
        return raw
    if isinstance(sample, bool):
        parsed = coerce_tri_state(raw)
        return raw if parsed is None else parsed
    text = raw.strip()
    try:
        if isinstance(sample, uuid.UUID):
            return uuid.UUID(text)
        if isinstance(sample, (int, float, Decimal)):
            return type(sample)(text.replace(",", "."))
    except (ValueError, InvalidOperation):
        return raw
    return raw


def condition_matches(condition: Condition, record: Any) -> bool:
    op = condition.op
    if op == "ilike":
        return any(_ilike(read_field(record, col), condition.value) for col in condition.columns)

    value = read_field(record, condition.columns[0])
    if op == "not_deleted":
        if value is MISSING:
            raise ValueError(f"record has no soft-delete field \"{condition.columns[0]}\"")
        return not value
    if value is MISSING or value is None:
        return False
    try:
        if op == "eq":
            return value == _like(value, condition.value)
        if op == "in":
            return value in [_like(value, item) for item in condition.value]
        if op == "gte":
            return value >= _like(value, condition.value)
        if op == "lte":
            return value <= _like(value, condition.value)
        if op == "between":
            return _like(value, condition.value) <= value <= _like(value, condition.upper)
    except TypeError:
        # Values of incomparable types cannot satisfy the condition.
        return False
    raise ValueError(f"Unknown condition operator: {op}")

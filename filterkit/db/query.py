from __future__ import annotations

import enum
import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

from sqlalchemy import and_, asc, desc, false, or_
from sqlalchemy.orm import Query, Session

from filterkit.schemas.criteria import coerce_tri_state
from filterkit.schemas.page import SortClause
from filterkit.services.predicates import Condition, Predicate

_LOG = logging.getLogger("filterkit.db")


class UncoercibleValue(ValueError):
    pass


_LIKE_ESCAPE = "/"


def _escape_like(text: str) -> str:
    return (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def _coerce_number_value(value, python_type):
    if python_type in {int, float} and isinstance(value, (int, float)) and not isinstance(value, bool):
        return python_type(value)
    if python_type is Decimal and isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        raise UncoercibleValue(value)
    normalized = text.replace(",", ".")
    try:
        if python_type is int:
            return int(normalized)
        if python_type is float:
            return float(normalized)
        return Decimal(normalized)
    except (ValueError, TypeError, InvalidOperation):
        raise UncoercibleValue(value)


def _coerce_date_value(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise UncoercibleValue(value)


def _coerce_datetime_value(value):
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    else:
        text = str(value or "").strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise UncoercibleValue(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _coerce_enum_value(value, enum_cls):
    if isinstance(value, enum_cls):
        return value
    key = str(value).strip()
    if key in enum_cls.__members__:
        return enum_cls[key]
    for member in enum_cls:
        if str(member.value) == key:
            return member
    raise UncoercibleValue(value)


def _column_python_type(column):
    try:
        return column.property.columns[0].type.python_type
    except (AttributeError, IndexError, NotImplementedError):
        return None


def coerce_filter_value(column, value):
    python_type = _column_python_type(column)
    if python_type is None or value is None:
        return value
    if python_type is uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value).strip())
        except ValueError:
            raise UncoercibleValue(value)
    if python_type is bool:
        parsed = coerce_tri_state(value)
        if parsed is None:
            raise UncoercibleValue(value)
        return parsed
    if python_type in {int, float, Decimal}:
        return _coerce_number_value(value, python_type)
    if python_type is date:
        return _coerce_date_value(value)
    if python_type is datetime:
        return _coerce_datetime_value(value)
    if isinstance(python_type, type) and issubclass(python_type, enum.Enum):
        return _coerce_enum_value(value, python_type)
    if python_type is str and isinstance(value, enum.Enum):
        return value.value if isinstance(value.value, str) else value.name
    if python_type is str and not isinstance(value, str):
        return str(value)
    return value


def _condition_clause(model, condition: Condition):
    if condition.op == "ilike":
        cols = [getattr(model, name, None) for name in condition.columns]
        cols = [col for col in cols if col is not None]
        if not cols:
            return None
        pattern = f"%{_escape_like(condition.value)}%"
        return or_(*[col.ilike(pattern, escape=_LIKE_ESCAPE) for col in cols])

    col = getattr(model, condition.columns[0], None)
    if col is None and condition.op == "not_deleted":
        raise ValueError(f"{model.__name__} has no soft-delete column \"{condition.columns[0]}\"")
    if col is None:
        _LOG.debug("skip filter on unknown column %s.%s", model.__name__, condition.columns[0])
        return None
    if condition.op == "not_deleted":
        return col.is_(False)
    if condition.op == "in":
        values = []
        for item in condition.value:
            try:
                values.append(coerce_filter_value(col, item))
            except UncoercibleValue:
                continue
        if not values:
            return false()
        return col.in_(values)
    try:
        value = coerce_filter_value(col, condition.value)
        upper = coerce_filter_value(col, condition.upper)
    except UncoercibleValue:
        return false()
    if condition.op == "eq":
        return col == value
    if condition.op == "gte":
        return col >= value
    if condition.op == "lte":
        return col <= value
    if condition.op == "between":
        return col.between(value, upper)
    raise ValueError(f"Unknown condition operator: {condition.op}")


def predicate_clause(model, predicate: Predicate):
    clauses = [_condition_clause(model, c) for c in predicate.conditions]
    clauses = [c for c in clauses if c is not None]
    if not clauses:
        return None
    return and_(*clauses)


def apply_predicate(q: Query, model, predicate: Predicate) -> Query:
    clause = predicate_clause(model, predicate)
    if clause is None:
        return q
    return q.filter(clause)


def apply_sort(q: Query, model, sort: SortClause) -> Query:
    col = getattr(model, sort.field, None)
    if col is None:
        col = getattr(model, SortClause().field, None)
        sort = SortClause()
    if col is not None:
        q = q.order_by(asc(col) if sort.dir == "asc" else desc(col))
    tiebreaker = getattr(model, "id", None)
    if tiebreaker is not None and sort.field != "id":
        q = q.order_by(asc(tiebreaker) if sort.dir == "asc" else desc(tiebreaker))
    return q


class SqlAlchemyRepository:
    """Runs composed predicates as SQL against one mapped model."""

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def query(self, predicate: Predicate, offset: int, limit: int, sort: SortClause):
        q = apply_predicate(self.db.query(self.model), self.model, predicate)
        total = q.count()
        rows = apply_sort(q, self.model, sort).offset(offset).limit(limit).all()
        return rows, total

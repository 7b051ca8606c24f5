from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Optional

from pydantic import BaseModel

from filterkit.core.config import settings
from filterkit.schemas.page import Page, SortClause
from filterkit.services.predicates import Predicate, not_deleted
from filterkit.services.repositories import RecordRepository
from filterkit.services.strategies import FieldStrategy

_LOG = logging.getLogger("filterkit.query")


def build_predicate(criteria: BaseModel, strategies: Iterable[FieldStrategy], *, deleted_column: str) -> Predicate:
    """AND the not-deleted condition with one predicate per strategy.

    Strategies whose criteria field is absent, blank or empty add nothing, so a
    criteria object with no filters yields the not-deleted condition alone.
    """
    if not deleted_column:
        raise ValueError("deleted_column is required")
    predicate = not_deleted(deleted_column)
    for strategy in strategies:
        predicate = predicate & strategy.to_predicate(criteria)
    _LOG.debug("composed predicate with %d condition(s)", len(predicate.conditions))
    return predicate


def normalize_page_index(page: Optional[int]) -> int:
    page = int(page or 0)
    return page - 1 if page > 0 else 0


def normalize_page_size(size: Optional[int]) -> int:
    size = int(size or 0)
    return size if size > 0 else settings.DEFAULT_PAGE_SIZE


def execute(
    predicate: Predicate,
    repository: RecordRepository,
    *,
    page: Optional[int] = None,
    size: Optional[int] = None,
    sort: Optional[SortClause] = None,
) -> Page[Any]:
    index = normalize_page_index(page)
    limit = normalize_page_size(size)
    sort = sort or SortClause()
    items, total = repository.query(predicate, index * limit, limit, sort)
    _LOG.debug(
        "page=%s size=%s sort=%s:%s total=%s returned=%s",
        index + 1,
        limit,
        sort.field,
        sort.dir,
        total,
        len(items),
    )
    return Page(
        page=index + 1,
        size=limit,
        total_elements=total,
        total_pages=math.ceil(total / limit),
        content=list(items),
    )


def compose_and_execute(
    criteria: BaseModel,
    strategies: Iterable[FieldStrategy],
    repository: RecordRepository,
    *,
    deleted_column: str = settings.SOFT_DELETE_COLUMN,
    sort: Optional[SortClause] = None,
) -> Page[Any]:
    predicate = build_predicate(criteria, strategies, deleted_column=deleted_column)
    return execute(
        predicate,
        repository,
        page=getattr(criteria, "page", None),
        size=getattr(criteria, "size", None),
        sort=sort,
    )

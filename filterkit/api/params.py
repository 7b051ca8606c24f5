from typing import List, Optional

from fastapi import Query

from filterkit.core.config import settings
from filterkit.schemas.criteria import FilterCriteria
from filterkit.schemas.page import SortClause


def criteria_params(
    ids: Optional[List[str]] = Query(default=None),
    text: Optional[str] = Query(default=None),
    code: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None),
    related_id: Optional[str] = Query(default=None),
    related_ids: Optional[List[str]] = Query(default=None),
    flag: Optional[str] = Query(default=None),
    created_after: Optional[str] = Query(default=None),
    created_before: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    size: Optional[str] = Query(default=None),
) -> FilterCriteria:
    # Repeated and comma-separated id params are both accepted: ?ids=1&ids=2 or ?ids=1,2
    return FilterCriteria(
        ids=_flatten(ids),
        text=text,
        code=code,
        status=status,
        related_id=related_id,
        related_ids=_flatten(related_ids),
        flag=flag,
        created_after=created_after,
        created_before=created_before,
        page=page,
        size=size,
    )


def sort_params(
    sort: Optional[str] = Query(default=None),
    dir: Optional[str] = Query(default=None),
) -> SortClause:
    field = str(sort or "").strip() or settings.DEFAULT_SORT_FIELD
    direction = str(dir or "").strip().lower()
    if direction not in {"asc", "desc"}:
        direction = settings.DEFAULT_SORT_DIR
    return SortClause(field=field, dir=direction)


def _flatten(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    out: List[str] = []
    for value in values:
        out.extend(value.split(","))
    return out

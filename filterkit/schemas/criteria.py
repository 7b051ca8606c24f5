from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from filterkit.core.config import settings

_TRUE_LITERALS = {"1", "true", "yes", "y", "да"}
_FALSE_LITERALS = {"0", "false", "no", "n", "нет"}


def _blank_to_none(value):
    if isinstance(value, enum.Enum):
        value = value.value if isinstance(value.value, str) else value.name
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return value


def _split_list(value):
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple, set)):
        value = [value]
    items = []
    for item in value:
        item = _blank_to_none(item)
        if item is not None:
            items.append(item)
    return items


def coerce_tri_state(value) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    return None


def _lenient_datetime(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    else:
        text = str(value or "").strip()
        if not text:
            return None
        try:
            # YYYY-MM-DD means the start of that day.
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _lenient_int(value, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


class FilterCriteria(BaseModel):
    """Optional constraints for one list request.

    Every field except the pagination pair may be left unset. Blank strings and
    empty lists are treated as "no constraint"; pagination values are kept as
    given and normalized when the query executes.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    ids: Optional[List[Any]] = None
    text: Optional[str] = None
    code: Optional[str] = None
    status: Optional[str] = None
    related_id: Optional[Any] = None
    related_ids: Optional[List[Any]] = None
    flag: Optional[bool] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None

    page: int = 1
    size: int = settings.DEFAULT_PAGE_SIZE

    @field_validator("text", "code", "status", "related_id", mode="before")
    @classmethod
    def _strip_blank(cls, value):
        return _blank_to_none(value)

    @field_validator("ids", "related_ids", mode="before")
    @classmethod
    def _split_ids(cls, value):
        return _split_list(value)

    @field_validator("flag", mode="before")
    @classmethod
    def _tri_state(cls, value):
        return coerce_tri_state(value)

    @field_validator("created_after", "created_before", mode="before")
    @classmethod
    def _parse_datetime(cls, value):
        return _lenient_datetime(value)

    @field_validator("page", mode="before")
    @classmethod
    def _lenient_page(cls, value):
        return _lenient_int(value, 1)

    @field_validator("size", mode="before")
    @classmethod
    def _lenient_size(cls, value):
        return _lenient_int(value, settings.DEFAULT_PAGE_SIZE)

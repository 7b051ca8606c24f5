from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, List, Literal, TypeVar

from filterkit.core.config import settings

T = TypeVar("T")
Dir = Literal["asc", "desc"]

class SortClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = settings.DEFAULT_SORT_FIELD
    dir: Dir = settings.DEFAULT_SORT_DIR

class Page(BaseModel, Generic[T]):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, arbitrary_types_allowed=True)

    page: int
    size: int
    total_elements: int
    total_pages: int
    content: List[T] = []

from __future__ import annotations

from typing import Any, Iterable, List, Protocol, Sequence, Tuple

from filterkit.schemas.page import SortClause
from filterkit.services.predicates import Predicate, MISSING, read_field


class RecordRepository(Protocol):
    def query(self, predicate: Predicate, offset: int, limit: int, sort: SortClause) -> Tuple[Sequence[Any], int]:
        ...


class InMemoryRepository:
    """Evaluates predicates against records held in a list.

    Records may be plain objects or dicts. Sorting is stable and records
    without a value for the sort field come last in either direction.
    """

    def __init__(self, records: Iterable[Any] = ()):
        self.records: List[Any] = list(records)

    def add(self, record: Any) -> None:
        self.records.append(record)

    def query(self, predicate: Predicate, offset: int, limit: int, sort: SortClause) -> Tuple[List[Any], int]:
        matched = [r for r in self.records if predicate.matches(r)]
        ordered = self._sorted(matched, sort)
        return ordered[offset : offset + limit], len(matched)

    @staticmethod
    def _sorted(records: List[Any], sort: SortClause) -> List[Any]:
        present = []
        missing = []
        for record in records:
            value = read_field(record, sort.field)
            if value is MISSING or value is None:
                missing.append(record)
            else:
                present.append(record)
        if not present and records and sort != SortClause():
            # Nothing carries the requested field; use the default order instead.
            return InMemoryRepository._sorted(records, SortClause())
        present.sort(key=lambda r: read_field(r, sort.field), reverse=sort.dir == "desc")
        return present + missing

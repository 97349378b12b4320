"""Lenient sort-token parsing and comparator composition.

Sort tokens come straight from query strings (``"name,desc"``), so parsing
never fails: unknown fields are dropped and unknown directions degrade to
ascending. The tie-breaker field is always appended when missing so the
resulting order is total.
"""
import functools
import logging
from typing import Any, Callable, Iterable, Sequence, TypeVar

from .paging import ASC, DIRECTIONS, Sort

log = logging.getLogger(__name__)

T = TypeVar("T")
Comparator = Callable[[Any, Any], int]

SORTABLE_FIELDS = ("id", "name")
TIEBREAKER = "id"


def parse_token(token: str) -> Sort | None:
    parts = token.strip().lower().split(",")
    field_name = parts[0].strip()
    if not field_name:
        return None
    direction = parts[1].strip() if len(parts) > 1 else ""
    if direction and direction not in DIRECTIONS:
        log.debug("parse_token: unknown direction %r in %r, using asc", direction, token)
    return Sort(field=field_name, direction=DIRECTIONS.get(direction, ASC))


def parse_sort(
    tokens: str | Iterable[str] | None,
    allowed: Sequence[str] = SORTABLE_FIELDS,
    tiebreaker: str = TIEBREAKER,
) -> list[Sort]:
    if tokens is None:
        tokens = ()
    elif isinstance(tokens, str):
        tokens = (tokens,)

    sorts: list[Sort] = []
    for token in tokens:
        parsed = parse_token(token)
        if parsed is None:
            continue
        if parsed.field not in allowed:
            log.debug("parse_sort: dropping directive on unsortable field %r", parsed.field)
            continue
        sorts.append(parsed)

    if not any(s.field == tiebreaker for s in sorts):
        sorts.append(Sort(field=tiebreaker, direction=ASC))
    return sorts


def _extract(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item[name]
    return getattr(item, name)


def field_comparator(sort: Sort) -> Comparator:
    def compare(a: Any, b: Any) -> int:
        left, right = _extract(a, sort.field), _extract(b, sort.field)
        result = (left > right) - (left < right)
        return -result if sort.descending else result

    return compare


def compose(comparators: Sequence[Comparator]) -> Comparator:
    def compare(a: Any, b: Any) -> int:
        for comparator in comparators:
            result = comparator(a, b)
            if result:
                return result
        return 0

    return compare


def sort_records(records: Iterable[T], sorts: Sequence[Sort]) -> list[T]:
    comparator = compose([field_comparator(s) for s in sorts])
    return sorted(records, key=functools.cmp_to_key(comparator))

import logging
from typing import Iterable, Sequence, TypeVar

from pico_ioc import component

from .config import PagingSettings
from .paging import Page, PageRequest
from .sorting import parse_sort, sort_records

log = logging.getLogger(__name__)

T = TypeVar("T")


@component
class PaginationEngine:
    """Sorts and slices an in-memory snapshot.

    Inputs are normalized, never rejected: ``size`` is clamped to
    ``[1, max_size]``, a negative ``page`` slices as page 0, pages past the
    end are empty. The returned page echoes the caller's raw ``page``.
    """

    def __init__(self, settings: PagingSettings):
        self.settings = settings

    def paginate(
        self,
        records: Iterable[T],
        page: int = 0,
        size: int | None = None,
        sort: str | Sequence[str] | None = ("id,asc",),
    ) -> Page[T]:
        if size is None:
            size = self.settings.default_size
        sorts = parse_sort(
            sort,
            allowed=self.settings.sortable_fields,
            tiebreaker=self.settings.tiebreaker,
        )
        request = PageRequest.of(page, size, sorts, max_size=self.settings.max_size)

        ordered = sort_records(tuple(records), request.sorts)
        start = request.offset
        end = min(start + request.size, len(ordered))
        content = ordered[start:end] if len(ordered) > start else []
        log.debug(
            "PaginationEngine.paginate: page=%s size=%s sort=%s -> %d of %d",
            page,
            request.size,
            [str(s) for s in request.sorts],
            len(content),
            len(ordered),
        )
        return Page(
            content=content,
            total_elements=len(ordered),
            page=page,
            size=request.size,
            sort=request.sorts,
        )

from typing import Sequence

from pico_ioc import component

from .config import PagingSettings
from .paging import Page, PageRequest, Slice
from .sorting import parse_sort
from .user_repository import UserRepository
from .users import UserRecord


@component
class UserSearchService:
    """Name search over the database, paged or sliced.

    Page and size are clamped the same way as the in-memory listing and the
    requested page number is echoed back unchanged.
    """

    def __init__(self, repository: UserRepository, settings: PagingSettings):
        self.repository = repository
        self.settings = settings

    def _request(self, page: int, size: int | None, sort: str | Sequence[str] | None) -> PageRequest:
        sorts = parse_sort(
            sort,
            allowed=self.settings.sortable_fields,
            tiebreaker=self.settings.tiebreaker,
        )
        if size is None:
            size = self.settings.default_size
        return PageRequest.of(page, size, sorts, max_size=self.settings.max_size)

    def search(
        self,
        q: str = "",
        page: int = 0,
        size: int | None = None,
        sort: str | Sequence[str] | None = ("id,asc",),
    ) -> Page[UserRecord]:
        result = self.repository.search(q, self._request(page, size, sort))
        return Page(
            content=[UserRecord.from_row(row) for row in result.content],
            total_elements=result.total_elements,
            page=page,
            size=result.size,
            sort=result.sort,
        )

    def search_slice(
        self,
        q: str = "",
        page: int = 0,
        size: int | None = None,
        sort: str | Sequence[str] | None = ("id,asc",),
    ) -> Slice[UserRecord]:
        result = self.repository.search_slice(q, self._request(page, size, sort))
        return Slice(
            content=[UserRecord.from_row(row) for row in result.content],
            page=page,
            size=result.size,
            has_next=result.has_next,
            sort=result.sort,
        )

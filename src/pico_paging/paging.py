from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50

ASC = "asc"
DESC = "desc"

DIRECTIONS = {
    "asc": ASC,
    "ascending": ASC,
    "desc": DESC,
    "descending": DESC,
}

# SQL backends bind OFFSET as a signed 64-bit integer.
MAX_OFFSET = 2**63 - 1


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass(frozen=True)
class Sort:
    field: str
    direction: str = ASC

    def __post_init__(self):
        normalized = DIRECTIONS.get(str(self.direction).strip().lower(), ASC)
        object.__setattr__(self, "direction", normalized)

    @property
    def descending(self) -> bool:
        return self.direction == DESC

    def __str__(self) -> str:
        return f"{self.field},{self.direction}"


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sorts: list[Sort] = field(default_factory=list)

    @classmethod
    def of(
        cls,
        page: int,
        size: int,
        sorts: Sequence[Sort] = (),
        max_size: int = MAX_PAGE_SIZE,
    ) -> "PageRequest":
        size = clamp(size, 1, max_size)
        page = clamp(page, 0, MAX_OFFSET // size)
        return cls(page=page, size=size, sorts=list(sorts))

    @property
    def offset(self) -> int:
        return self.page * self.size


def _serialize(item: Any) -> Any:
    to_dict = getattr(item, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if hasattr(item, "keys"):
        return dict(item)
    return item


@dataclass(frozen=True)
class Page(Generic[T]):
    content: Sequence[T]
    total_elements: int
    page: int
    size: int
    sort: Sequence[Sort] = ()

    @property
    def total_pages(self) -> int:
        if self.size <= 0 or self.total_elements == 0:
            return 0
        return (self.total_elements + self.size - 1) // self.size

    @property
    def has_next(self) -> bool:
        return max(self.page, 0) + 1 < self.total_pages

    @property
    def is_last(self) -> bool:
        return not self.has_next

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [_serialize(item) for item in self.content],
            "page": self.page,
            "size": self.size,
            "totalElements": self.total_elements,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "sort": [str(s) for s in self.sort],
        }


@dataclass(frozen=True)
class Slice(Generic[T]):
    """A page without a total count; ``has_next`` comes from a look-ahead row."""

    content: Sequence[T]
    page: int
    size: int
    has_next: bool
    sort: Sequence[Sort] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [_serialize(item) for item in self.content],
            "page": self.page,
            "size": self.size,
            "hasNext": self.has_next,
            "sort": [str(s) for s in self.sort],
        }

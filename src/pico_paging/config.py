from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from pico_ioc import configured

from .paging import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .sorting import SORTABLE_FIELDS, TIEBREAKER


@configured(prefix="database", mapping="tree")
@dataclass
class DatabaseSettings:
    url: str = "sqlite:///:memory:"
    echo: bool = False
    pool_size: int = 5
    pool_pre_ping: bool = True
    pool_recycle: int = 3600


@configured(prefix="paging", mapping="tree")
@dataclass
class PagingSettings:
    default_size: int = DEFAULT_PAGE_SIZE
    max_size: int = MAX_PAGE_SIZE
    sortable_fields: list[str] = field(default_factory=lambda: list(SORTABLE_FIELDS))
    tiebreaker: str = TIEBREAKER


@runtime_checkable
class DatabaseConfigurer(Protocol):
    """Runs against the engine once the session manager is built.

    Lower ``priority`` runs first.
    """

    priority: int = 0

    def configure(self, engine: Any) -> None: ...

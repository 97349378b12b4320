import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Sequence

from pico_ioc import component

from .engine import PaginationEngine
from .paging import Page

log = logging.getLogger(__name__)

SEED_SIZE = 30


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str
    email: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserRecord":
        return cls(id=row["id"], name=row["name"], email=row["email"])

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def seed_users(count: int = SEED_SIZE) -> list[UserRecord]:
    return [UserRecord(i, f"u{i}", f"u{i}@gmail.com") for i in range(count)]


@component
class InMemoryUserRepository:
    """Append-only user list; readers get a consistent snapshot."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: list[UserRecord] = seed_users()

    def find_all(self) -> tuple[UserRecord, ...]:
        with self._lock:
            return tuple(self._users)

    def add(self, name: str, email: str) -> UserRecord:
        with self._lock:
            next_id = max((u.id for u in self._users), default=-1) + 1
            user = UserRecord(next_id, name, email)
            self._users.append(user)
        log.debug("InMemoryUserRepository: added user id=%s", user.id)
        return user

    def count(self) -> int:
        with self._lock:
            return len(self._users)


@component
class UserListingService:
    def __init__(self, repository: InMemoryUserRepository, engine: PaginationEngine):
        self.repository = repository
        self.engine = engine

    def list_records(
        self,
        page: int = 0,
        size: int | None = None,
        sort: str | Sequence[str] = ("id,asc",),
    ) -> Page[UserRecord]:
        return self.engine.paginate(self.repository.find_all(), page=page, size=size, sort=sort)

import logging

from sqlalchemy import Integer, String, func, insert, select
from pico_ioc import component

from .base import AppBase, Mapped, mapped_column
from .config import DatabaseConfigurer
from .decorators import query, repository, transactional
from .paging import Page, PageRequest, Slice
from .session import SessionManager, get_session

log = logging.getLogger(__name__)

DEMO_USERS = (
    ("Alex", "alex@example.com"),
    ("Alex", "alex2@example.com"),
    ("Bella", "bella@example.com"),
    ("Chloe", "chloe@example.com"),
    ("Daniel", "daniel@example.com"),
    ("Ethan", "ethan@example.com"),
    ("Fiona", "fiona@example.com"),
    ("Grace", "grace@example.com"),
    ("Henry", "henry@example.com"),
    ("Ivy", "ivy@example.com"),
    ("Jacob", "jacob@example.com"),
    ("Liam", "liam@example.com"),
    ("Mia", "mia@example.com"),
)

NAME_CONTAINS = "lower(name) LIKE '%' || lower(:q) || '%'"


class UserEntity(AppBase):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)


@repository(entity=UserEntity)
class UserRepository:
    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    @query(expr=NAME_CONTAINS, paged=True)
    def search(self, q: str, page: PageRequest) -> Page:
        raise AssertionError("Body should not be executed")

    @query(expr=NAME_CONTAINS, sliced=True)
    def search_slice(self, q: str, page: PageRequest) -> Slice:
        raise AssertionError("Body should not be executed")

    @query.sql("SELECT id, name, email FROM users WHERE id = :user_id", unique=True)
    def find_by_id(self, user_id: int):
        raise AssertionError("Body should not be executed")

    @transactional(read_only=True)
    def count(self) -> int:
        session = get_session(self.session_manager)
        return session.scalar(select(func.count()).select_from(UserEntity))

    @transactional()
    def save(self, name: str, email: str) -> UserEntity:
        session = get_session(self.session_manager)
        user = UserEntity(name=name, email=email)
        session.add(user)
        session.flush()
        return user


@component
class UserSeed(DatabaseConfigurer):
    """Creates the schema and inserts demo users into an empty table."""

    priority = 10

    def __init__(self, base: AppBase):
        self.base = base

    def configure(self, engine) -> None:
        self.base.metadata.create_all(engine)
        with engine.begin() as conn:
            existing = conn.execute(select(func.count()).select_from(UserEntity)).scalar_one()
            if existing > 0:
                log.debug("UserSeed: %d users present, skipping seed", existing)
                return
            conn.execute(
                insert(UserEntity),
                [{"name": name, "email": email} for name, email in DEMO_USERS],
            )
            log.info("UserSeed: inserted %d demo users", len(DEMO_USERS))

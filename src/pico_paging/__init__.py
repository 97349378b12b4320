from .config import DatabaseSettings, DatabaseConfigurer, PagingSettings
from .decorators import transactional, repository, query
from .session import SessionManager, get_session
from .interceptor import TransactionalInterceptor
from .factory import SqlAlchemyFactory
from .base import AppBase, Mapped, mapped_column
from .paging import Page, PageRequest, Slice, Sort, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .sorting import parse_sort, compose, field_comparator, sort_records
from .engine import PaginationEngine
from .repository_interceptor import RepositoryQueryInterceptor
from .users import UserRecord, InMemoryUserRepository, UserListingService
from .user_repository import UserEntity, UserRepository, UserSeed
from .search import UserSearchService

__all__ = [
    "DatabaseSettings",
    "DatabaseConfigurer",
    "PagingSettings",
    "transactional",
    "repository",
    "query",
    "SessionManager",
    "get_session",
    "TransactionalInterceptor",
    "SqlAlchemyFactory",
    "AppBase",
    "Mapped",
    "mapped_column",
    "Page",
    "PageRequest",
    "Slice",
    "Sort",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "parse_sort",
    "compose",
    "field_comparator",
    "sort_records",
    "PaginationEngine",
    "RepositoryQueryInterceptor",
    "UserRecord",
    "InMemoryUserRepository",
    "UserListingService",
    "UserEntity",
    "UserRepository",
    "UserSeed",
    "UserSearchService",
]

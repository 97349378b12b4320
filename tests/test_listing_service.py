import threading

import pytest
from pico_ioc import init, configuration, DictSource

from pico_paging import InMemoryUserRepository, PaginationEngine, PagingSettings, UserListingService


@pytest.fixture
def container():
    cfg = configuration(
        DictSource(
            {
                "database": {"url": "sqlite:///:memory:"},
                "paging": {"default_size": 20, "max_size": 50},
            }
        )
    )
    c = init(modules=["pico_paging"], config=cfg)
    try:
        yield c
    finally:
        c.cleanup_all()


@pytest.fixture
def service(container) -> UserListingService:
    return container.get(UserListingService)


def test_container_wires_listing_service(container, service):
    assert isinstance(service.engine, PaginationEngine)
    assert service.repository is container.get(InMemoryUserRepository)


def test_list_records_defaults(service):
    page = service.list_records()

    assert [u.id for u in page.content] == list(range(20))
    assert page.total_pages == 2
    assert page.has_next is True
    assert page.to_dict()["sort"] == ["id,asc"]


def test_list_records_unknown_sort(service):
    page = service.list_records(page=0, size=3, sort=["unknownField,asc"])

    assert page.to_dict()["sort"] == ["id,asc"]
    assert [u.id for u in page.content] == [0, 1, 2]


def test_list_records_sees_added_users(service):
    added = service.repository.add("zed", "zed@example.com")
    page = service.list_records(page=1, size=20)

    assert added.id == 30
    assert page.total_elements == 31
    assert page.content[-1] == added


def test_snapshot_is_immutable_copy():
    repo = InMemoryUserRepository()
    snapshot = repo.find_all()
    repo.add("late", "late@example.com")

    assert len(snapshot) == 30
    assert repo.count() == 31


def test_concurrent_adds_and_reads():
    repo = InMemoryUserRepository()
    engine_service = UserListingService(repo, PaginationEngine(PagingSettings()))
    errors = []

    def writer():
        for i in range(50):
            repo.add(f"w{i}", f"w{i}@example.com")

    def reader():
        try:
            for _ in range(50):
                page = engine_service.list_records(size=50, sort=["name,asc"])
                assert len(page.content) <= 50
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    ids = [u.id for u in repo.find_all()]
    assert len(ids) == len(set(ids)) == 80


def test_list_records_uses_configured_default_size():
    service = UserListingService(
        InMemoryUserRepository(), PaginationEngine(PagingSettings(default_size=7))
    )

    page = service.list_records()

    assert page.size == 7
    assert [u.id for u in page.content] == list(range(7))

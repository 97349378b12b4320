import pytest

from pico_paging import PageRequest, PagingSettings, PaginationEngine, UserRecord
from pico_paging.users import seed_users


@pytest.fixture
def engine():
    return PaginationEngine(PagingSettings())


@pytest.fixture
def users():
    return seed_users(30)


@pytest.fixture
def duplicated():
    return [
        UserRecord(4, "Bob", "b1@example.com"),
        UserRecord(1, "Alice", "a1@example.com"),
        UserRecord(3, "Alice", "a2@example.com"),
        UserRecord(2, "Bob", "b2@example.com"),
        UserRecord(0, "Alice", "a3@example.com"),
    ]


def test_first_page_by_id(engine, users):
    page = engine.paginate(users, page=0, size=20, sort=["id,asc"])

    assert [u.id for u in page.content] == list(range(20))
    assert page.total_elements == 30
    assert page.total_pages == 2
    assert page.has_next is True
    assert [str(s) for s in page.sort] == ["id,asc"]


def test_last_page_is_partial(engine, users):
    page = engine.paginate(users, page=1, size=20)

    assert [u.id for u in page.content] == list(range(20, 30))
    assert page.has_next is False
    assert page.is_last


def test_page_beyond_end_is_empty(engine, users):
    page = engine.paginate(users, page=5, size=20)

    assert page.content == []
    assert page.has_next is False
    assert page.page == 5
    assert page.total_pages == 2


@pytest.mark.parametrize("size, clamped", [(0, 1), (-3, 1), (51, 50), (1000, 50), (7, 7)])
def test_size_is_clamped(engine, users, size, clamped):
    page = engine.paginate(users, page=0, size=size)

    assert page.size == clamped
    assert len(page.content) <= clamped
    assert page.total_pages == -(-30 // clamped)


def test_negative_page_slices_first_page_and_echoes_raw_value(engine, users):
    page = engine.paginate(users, page=-2, size=10)

    assert page.page == -2
    assert [u.id for u in page.content] == list(range(10))
    assert page.has_next is True


def test_duplicates_tie_break_on_ascending_id(engine, duplicated):
    page = engine.paginate(duplicated, sort=["name,asc"])

    assert [(u.name, u.id) for u in page.content] == [
        ("Alice", 0),
        ("Alice", 1),
        ("Alice", 3),
        ("Bob", 2),
        ("Bob", 4),
    ]
    assert [str(s) for s in page.sort] == ["name,asc", "id,asc"]


def test_explicit_id_desc_overrides_tiebreak(engine, duplicated):
    page = engine.paginate(duplicated, sort=["name,asc", "id,desc"])

    assert [u.id for u in page.content] == [3, 1, 0, 4, 2]
    assert [str(s) for s in page.sort] == ["name,asc", "id,desc"]


def test_name_descending(engine, duplicated):
    page = engine.paginate(duplicated, sort=["NAME,DESC"])

    assert [u.id for u in page.content] == [2, 4, 0, 1, 3]


def test_unknown_field_falls_back_to_id(engine, users):
    page = engine.paginate(list(reversed(users)), size=5, sort=["unknownField,asc"])

    assert [str(s) for s in page.sort] == ["id,asc"]
    assert [u.id for u in page.content] == [0, 1, 2, 3, 4]


def test_repeated_calls_are_identical(engine, duplicated):
    first = engine.paginate(duplicated, size=3, sort=["name,desc"])
    second = engine.paginate(duplicated, size=3, sort=["name,desc"])

    assert first.content == second.content


def test_input_is_not_mutated(engine, duplicated):
    before = list(duplicated)
    engine.paginate(duplicated, sort=["name,asc"])
    assert duplicated == before


def test_empty_collection(engine):
    page = engine.paginate([], page=0, size=10)

    assert page.content == []
    assert page.total_elements == 0
    assert page.total_pages == 0
    assert page.has_next is False


def test_default_size_comes_from_settings(users):
    engine = PaginationEngine(PagingSettings(default_size=7, max_size=10))

    assert engine.paginate(users).size == 7
    assert engine.paginate(users, size=25).size == 10


def test_to_dict_response_shape(engine, users):
    body = engine.paginate(users, page=1, size=2, sort=["name,desc"]).to_dict()

    assert set(body) == {"content", "page", "size", "totalElements", "totalPages", "hasNext", "sort"}
    assert body["page"] == 1
    assert body["size"] == 2
    assert body["totalElements"] == 30
    assert body["totalPages"] == 15
    assert body["hasNext"] is True
    assert body["sort"] == ["name,desc", "id,asc"]
    # names compare as strings: u9, u8, u7, u6, ...
    assert body["content"][0] == {"id": 7, "name": "u7", "email": "u7@gmail.com"}


def test_page_request_keeps_offset_in_64_bit_range():
    req = PageRequest.of(10**18, 50)

    assert req.size == 50
    assert req.offset <= 2**63 - 1
    assert PageRequest.of(-4, 10).page == 0


def test_huge_page_in_memory_is_empty(engine, users):
    page = engine.paginate(users, page=10**18, size=50)

    assert page.content == []
    assert page.page == 10**18
    assert page.has_next is False

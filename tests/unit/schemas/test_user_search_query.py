import pytest

from directory_search.schemas.user_search_query import UserSearchQuery
from directory_search.schemas.validation import validate_or_raise


@pytest.mark.unit
def test_user_search_query_defaults() -> None:
    filters = validate_or_raise(UserSearchQuery, {}).to_filters()

    assert filters.page == 1
    assert filters.per_page == 30
    assert filters.order == "username"
    assert filters.asc is True
    assert filters.attributes.to_query_params() == {}


@pytest.mark.unit
def test_user_search_query_normalizes_and_clamps() -> None:
    filters = validate_or_raise(
        UserSearchQuery,
        {
            "page": "0",
            "per_page": "500",
            "order": " LAST_SEEN ",
            "asc": "TRUE",
            "country": " USA ",
            "listen": "",
        },
    ).to_filters()

    assert filters.page == 1
    assert filters.per_page == 100
    assert filters.order == "last_seen"
    # 只有小写 "true" 表示升序
    assert filters.asc is False
    assert filters.attributes.country == "USA"
    assert filters.attributes.listen is None


@pytest.mark.unit
def test_user_search_query_falls_back_for_unparseable_values() -> None:
    filters = validate_or_raise(
        UserSearchQuery,
        {"page": "abc", "per_page": "-3", "order": "karma", "asc": None},
    ).to_filters()

    assert filters.page == 1
    assert filters.per_page == 30
    assert filters.order == "username"
    assert filters.asc is True
    assert filters.offset == 0

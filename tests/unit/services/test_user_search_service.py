from __future__ import annotations

from datetime import UTC, datetime

import pytest

from directory_search.core.exceptions import NotFoundError
from directory_search.core.types.user_search import AttributeFilterParams, UserSearchFilters
from directory_search.services.site_settings import SearchSiteSettings
from directory_search.services.user_search.options_service import UserSearchOptionsService
from directory_search.services.user_search.user_search_service import UserSearchService

FIELD_NAMES = {"gender": "Gender", "country": "Country", "listen": "Listen", "share": "Share"}


def _filters(**overrides) -> UserSearchFilters:
    values = {"page": 1, "per_page": 30, "order": "username", "asc": True}
    values.update(overrides)
    return UserSearchFilters(**values)


def _service(**settings_overrides) -> UserSearchService:
    settings = SearchSiteSettings(field_names=FIELD_NAMES, **settings_overrides)
    return UserSearchService(settings=settings)


@pytest.mark.unit
def test_search_raises_not_found_when_disabled(app) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        _service(user_search_enabled=False).search(_filters())

    assert exc_info.value.message_key == "USER_SEARCH_DISABLED"


@pytest.mark.unit
def test_search_filters_pages_and_orders_by_username(seed) -> None:
    country = seed.field("Country")
    for username in ("Carol", "alice", "Bob", "dave"):
        account = seed.user(username)
        seed.value(account, country, "USA")
        seed.value(account, country, "USA")
    seed.user("erin")

    first = _service().search(_filters(per_page=2, attributes=AttributeFilterParams(country="usa")))
    second = _service().search(_filters(page=2, per_page=2, attributes=AttributeFilterParams(country="usa")))

    assert [item.username for item in first.items] == ["alice", "Bob"]
    assert [item.username for item in second.items] == ["Carol", "dave"]
    assert first.total == 4
    assert first.pages == 2


@pytest.mark.unit
def test_search_orders_by_last_seen_with_nulls_last(seed) -> None:
    seed.user("never")
    seed.user("old", last_seen_at=datetime(2024, 1, 1, tzinfo=UTC))
    seed.user("recent", last_seen_at=datetime(2024, 6, 1, tzinfo=UTC))

    ascending = _service().search(_filters(order="last_seen", asc=True))
    descending = _service().search(_filters(order="last_seen", asc=False))

    assert [item.username for item in ascending.items] == ["old", "recent", "never"]
    assert [item.username for item in descending.items] == ["recent", "old", "never"]


@pytest.mark.unit
def test_search_enforces_min_trust_level(seed) -> None:
    seed.user("newcomer", trust_level=0)
    seed.user("regular", trust_level=3)

    result = _service(min_trust_level=2).search(_filters())

    assert [item.username for item in result.items] == ["regular"]
    assert result.items[0].trust_level == 3


@pytest.mark.unit
def test_options_are_ordered_by_id_and_empty_for_unknown_fields(seed) -> None:
    seed.field("Country", options=("USA", "Canada", "Brazil"))
    seed.field("Listen", options=("Rock", "Jazz"))

    options = UserSearchOptionsService(settings=SearchSiteSettings(field_names=FIELD_NAMES)).get_options()

    assert options.country == ["USA", "Canada", "Brazil"]
    assert options.listen == ["Rock", "Jazz"]
    assert options.gender == []
    assert options.share == []


@pytest.mark.unit
def test_options_raise_not_found_when_disabled(app) -> None:
    settings = SearchSiteSettings(user_search_enabled=False, field_names=FIELD_NAMES)

    with pytest.raises(NotFoundError):
        UserSearchOptionsService(settings=settings).get_options()

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from directory_search.constants.directory import GroupVisibility, PeriodType
from directory_search.core.exceptions import AuthorizationError, ValidationError
from directory_search.core.types.directory import DirectoryListFilters
from directory_search.core.types.user_search import AttributeFilterParams
from directory_search.services.directory.directory_items_service import DirectoryItemsService
from directory_search.services.site_settings import SearchSiteSettings

FIELD_NAMES = {"gender": "Gender", "country": "Country", "listen": "Listen", "share": "Share"}
BASE_SEEN = datetime(2024, 1, 1, tzinfo=UTC)


def _filters(**overrides) -> DirectoryListFilters:
    values = {"period": "weekly", "page": 0, "limit": 50}
    values.update(overrides)
    return DirectoryListFilters(**values)


def _service(**settings_overrides) -> DirectoryItemsService:
    return DirectoryItemsService(settings=SearchSiteSettings(field_names=FIELD_NAMES, **settings_overrides))


def _user_ids(result) -> list[int]:
    return [item.user_id for item in result.items]


@pytest.mark.unit
def test_directory_disabled_is_access_denied(app) -> None:
    with pytest.raises(AuthorizationError) as exc_info:
        _service(directory_enabled=False).list_items(_filters())

    assert exc_info.value.message_key == "USER_DIRECTORY_DISABLED"


@pytest.mark.unit
def test_unknown_period_is_invalid_parameter(app) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _service().list_items(_filters(period="fortnightly"))

    assert exc_info.value.message_key == "INVALID_PERIOD"


@pytest.mark.unit
def test_only_requested_period_is_listed(seed) -> None:
    weekly = seed.user("weekly")
    monthly = seed.user("monthly")
    seed.directory_item(weekly, PeriodType.WEEKLY)
    seed.directory_item(monthly, PeriodType.MONTHLY)

    result = _service().list_items(_filters())

    assert _user_ids(result) == [weekly.id]
    assert result.total == 1
    assert result.last_updated_at == "2025-01-01T12:00:00+00:00"


@pytest.mark.unit
def test_last_seen_descending_sorts_nulls_last(seed) -> None:
    never = seed.user("never")
    dated = seed.user("dated", last_seen_at=BASE_SEEN)
    seed.directory_item(never)
    seed.directory_item(dated)

    result = _service().list_items(_filters(order="last_seen", asc=False))

    assert _user_ids(result) == [dated.id, never.id]


@pytest.mark.unit
def test_stat_column_ordering_uses_active_columns(seed) -> None:
    low = seed.user("low")
    high = seed.user("high")
    seed.directory_item(low, likes_received=1, post_count=9)
    seed.directory_item(high, likes_received=5, post_count=2)

    result = _service(directory_columns=("likes_received",)).list_items(
        _filters(order="likes_received", asc=False),
    )

    assert _user_ids(result) == [high.id, low.id]
    assert result.items[0].to_dict()["likes_received"] == 5
    assert "post_count" not in result.items[0].to_dict()


@pytest.mark.unit
def test_attribute_ordering_puts_missing_values_last_in_both_directions(seed) -> None:
    country = seed.field("Country")
    brazil = seed.user("brazil")
    angola = seed.user("angola")
    missing = seed.user("missing")
    seed.value(brazil, country, "Brazil")
    seed.value(angola, country, "Chile")
    seed.value(angola, country, "angola")
    for account in (missing, brazil, angola):
        seed.directory_item(account)

    ascending = _service().list_items(_filters(order="Country"))
    descending = _service().list_items(_filters(order="Country", asc=False))

    assert _user_ids(ascending) == [angola.id, brazil.id, missing.id]
    assert _user_ids(descending) == [brazil.id, angola.id, missing.id]


@pytest.mark.unit
def test_unknown_order_falls_back_to_entry_id(seed) -> None:
    accounts = [seed.user(f"user{index}", last_seen_at=BASE_SEEN - timedelta(days=index)) for index in range(3)]
    items = [seed.directory_item(account) for account in accounts]

    result = _service().list_items(_filters(order="no_such_order"))

    assert [item.id for item in result.items] == [item.id for item in items]


@pytest.mark.unit
def test_pages_concatenate_to_full_ordering_without_gaps(seed) -> None:
    # 所有人 last_seen 相同,顺序完全由条目 ID 决定
    items = [seed.directory_item(seed.user(f"tie{index}", last_seen_at=BASE_SEEN)) for index in range(7)]

    collected: list[int] = []
    for page in range(3):
        result = _service().list_items(_filters(order="last_seen", page=page, limit=3))
        collected.extend(item.id for item in result.items)
        assert result.total == 7

    assert collected == [item.id for item in items]


@pytest.mark.unit
def test_exclude_usernames_removes_named_accounts(seed) -> None:
    alice = seed.user("Alice")
    bob = seed.user("bob")
    carol = seed.user("carol")
    for account in (alice, bob, carol):
        seed.directory_item(account)

    for order in ("last_seen", "username", "likes_received"):
        result = _service().list_items(_filters(order=order, exclude_usernames="alice, BOB"))
        assert _user_ids(result) == [carol.id]


@pytest.mark.unit
def test_exclude_groups_removes_members(seed) -> None:
    staff = seed.group("staff")
    member = seed.user("member")
    outsider = seed.user("outsider")
    seed.membership(staff, member)
    seed.directory_item(member)
    seed.directory_item(outsider)

    result = _service().list_items(_filters(exclude_groups="staff|unknown"))

    assert _user_ids(result) == [outsider.id]


@pytest.mark.unit
def test_group_scope_and_visibility(seed) -> None:
    private = seed.group("private", members_visibility=GroupVisibility.MEMBERS)
    member = seed.user("member")
    outsider = seed.user("outsider")
    seed.membership(private, member)
    seed.directory_item(member)
    seed.directory_item(outsider)

    with pytest.raises(ValidationError) as not_found:
        _service().list_items(_filters(group="missing"), viewer=member)
    with pytest.raises(AuthorizationError) as denied:
        _service().list_items(_filters(group="private"), viewer=outsider)
    with pytest.raises(AuthorizationError):
        _service().list_items(_filters(group="private"))

    result = _service().list_items(_filters(group="private"), viewer=member)

    assert not_found.value.message_key == "GROUP_NOT_FOUND"
    assert denied.value.message_key == "GROUP_NOT_VISIBLE"
    assert _user_ids(result) == [member.id]


@pytest.mark.unit
def test_attribute_filters_apply_latest_value(seed) -> None:
    country = seed.field("Country")
    moved = seed.user("moved")
    stayed = seed.user("stayed")
    seed.value(moved, country, "USA")
    seed.value(moved, country, "Canada")
    seed.value(stayed, country, "usa")
    seed.directory_item(moved)
    seed.directory_item(stayed)

    result = _service().list_items(_filters(attributes=AttributeFilterParams(country="USA")))

    assert _user_ids(result) == [stayed.id]


@pytest.mark.unit
def test_baseline_and_attribute_filters_skipped_when_search_disabled(seed) -> None:
    country = seed.field("Country")
    inactive = seed.user("inactive", active=False)
    other = seed.user("other")
    seed.value(other, country, "Canada")
    seed.directory_item(inactive)
    seed.directory_item(other)

    result = _service(user_search_enabled=False).list_items(
        _filters(order="username", attributes=AttributeFilterParams(country="USA")),
    )

    assert _user_ids(result) == [inactive.id, other.id]


@pytest.mark.unit
def test_viewer_is_pinned_on_first_page_without_double_counting(seed) -> None:
    for index in range(12):
        seed.directory_item(seed.user(f"user{index:02d}", last_seen_at=BASE_SEEN + timedelta(days=index)))
    viewer = seed.user("viewer", last_seen_at=BASE_SEEN + timedelta(days=365))
    seed.directory_item(viewer)

    result = _service().list_items(_filters(limit=10), viewer=viewer)

    assert result.items[0].user_id == viewer.id
    assert _user_ids(result).count(viewer.id) == 1
    assert len(result.items) == 11
    assert result.total == 13
    assert result.pinned_user_id == viewer.id


@pytest.mark.unit
def test_viewer_not_pinned_when_already_on_page(seed) -> None:
    viewer = seed.user("viewer", last_seen_at=BASE_SEEN)
    other = seed.user("other", last_seen_at=BASE_SEEN + timedelta(days=1))
    seed.directory_item(viewer)
    seed.directory_item(other)

    result = _service().list_items(_filters(), viewer=viewer)

    assert _user_ids(result) == [viewer.id, other.id]
    assert result.pinned_user_id is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"page": 1},
        {"order": "last_seen"},
        {"order": "username"},
        {"exclude_usernames": "viewer"},
    ],
)
def test_viewer_not_pinned_outside_allowed_conditions(seed, overrides) -> None:
    for index in range(3):
        seed.directory_item(seed.user(f"user{index}", last_seen_at=BASE_SEEN + timedelta(days=index)))
    viewer = seed.user("viewer", last_seen_at=BASE_SEEN + timedelta(days=30))
    seed.directory_item(viewer)

    result = _service().list_items(_filters(limit=2, **overrides), viewer=viewer)

    assert result.pinned_user_id is None
    assert len(result.items) <= 2


@pytest.mark.unit
def test_viewer_not_pinned_with_attribute_filters(seed) -> None:
    country = seed.field("Country")
    viewer = seed.user("viewer")
    other = seed.user("other")
    seed.value(viewer, country, "Canada")
    seed.value(other, country, "USA")
    seed.directory_item(viewer)
    seed.directory_item(other)

    result = _service().list_items(_filters(attributes=AttributeFilterParams(country="usa")), viewer=viewer)

    assert _user_ids(result) == [other.id]


@pytest.mark.unit
def test_name_search_includes_viewer_when_candidates_visible(seed) -> None:
    alice = seed.user("alice")
    viewer = seed.user("viewer")
    bob = seed.user("bob")
    for account in (alice, viewer, bob):
        seed.directory_item(account)

    result = _service().list_items(_filters(order="username", name="ali"), viewer=viewer)

    assert _user_ids(result) == [alice.id, viewer.id]


@pytest.mark.unit
def test_name_search_without_candidates_is_empty(seed) -> None:
    viewer = seed.user("viewer")
    seed.directory_item(viewer)

    result = _service().list_items(_filters(name="zzz"), viewer=viewer)

    assert result.items == []
    assert result.total == 0


@pytest.mark.unit
def test_username_param_matches_exactly(seed) -> None:
    alice = seed.user("Alice")
    seed.directory_item(alice)
    seed.directory_item(seed.user("alice2"))

    assert _user_ids(_service().list_items(_filters(username="ALICE"))) == [alice.id]
    assert _service().list_items(_filters(username="nobody")).total == 0


@pytest.mark.unit
def test_load_more_url_echoes_request_parameters(seed) -> None:
    seed.directory_item(seed.user("alice"))

    result = _service().list_items(
        _filters(limit=10, asc=False, attributes=AttributeFilterParams(listen="rock,jazz")),
    )

    assert result.load_more_url.startswith("/api/v1/directory_items?")
    assert "order=last_seen" in result.load_more_url
    assert "asc=false" in result.load_more_url
    assert "page=1" in result.load_more_url
    assert "hb_listen=rock%2Cjazz" in result.load_more_url

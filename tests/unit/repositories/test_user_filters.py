from __future__ import annotations

from datetime import UTC, datetime

import pytest

from directory_search import db
from directory_search.core.types.user_search import AttributeFilterParams
from directory_search.models.user import User
from directory_search.repositories.user_filters import UserFilterComposer
from directory_search.services.user_search.field_resolver import UserFieldResolver

FIXED_NOW = datetime(2025, 6, 1, tzinfo=UTC)
FIELD_NAMES = {"gender": "Gender", "country": "Country", "listen": "Listen", "share": "Share"}


def _composer(*, min_trust_level: int = 0) -> UserFilterComposer:
    return UserFilterComposer(
        UserFieldResolver(),
        field_names=FIELD_NAMES,
        min_trust_level=min_trust_level,
        now=lambda: FIXED_NOW,
    )


def _usernames(composer: UserFilterComposer, params: AttributeFilterParams) -> list[str]:
    query = composer.compose(db.session.query(User.username), params)
    return sorted(username for (username,) in query.all())


@pytest.mark.unit
def test_baseline_excludes_ineligible_accounts(seed) -> None:
    seed.user("eligible", trust_level=2)
    seed.user("inactive", active=False, trust_level=2)
    seed.user("staged", staged=True, trust_level=2)
    seed.user("low_trust", trust_level=0)
    seed.user("suspended", trust_level=2, suspended_till=datetime(2026, 1, 1, tzinfo=UTC))
    seed.user("suspension_lifted", trust_level=2, suspended_till=datetime(2025, 1, 1, tzinfo=UTC))

    assert _usernames(_composer(min_trust_level=1), AttributeFilterParams()) == ["eligible", "suspension_lifted"]


@pytest.mark.unit
def test_baseline_applies_regardless_of_attribute_filters(seed) -> None:
    country = seed.field("Country")
    active = seed.user("active")
    inactive = seed.user("inactive", active=False)
    seed.value(active, country, "USA")
    seed.value(inactive, country, "USA")

    assert _usernames(_composer(), AttributeFilterParams(country="usa")) == ["active"]


@pytest.mark.unit
def test_absent_or_blank_params_leave_dimension_unconstrained(seed) -> None:
    seed.field("Country")
    seed.user("a")
    seed.user("b")

    assert _usernames(_composer(), AttributeFilterParams(country="   ", listen=" , ,")) == ["a", "b"]


@pytest.mark.unit
def test_unconfigured_field_name_is_a_no_op(seed) -> None:
    seed.user("a")
    seed.user("b")

    # 未创建 Gender 字段定义,筛选被跳过而不是返回空结果
    assert _usernames(_composer(), AttributeFilterParams(gender="female")) == ["a", "b"]


@pytest.mark.unit
def test_multi_value_filter_matches_any_normalized_candidate(seed) -> None:
    listen = seed.field("Listen")
    rock = seed.user("rock_fan")
    jazz = seed.user("jazz_fan")
    pop = seed.user("pop_fan")
    seed.value(rock, listen, "Rock")
    seed.value(jazz, listen, " jazz ")
    seed.value(pop, listen, "Pop")

    params = AttributeFilterParams(listen=" rock , JAZZ,,")

    assert _usernames(_composer(), params) == ["jazz_fan", "rock_fan"]


@pytest.mark.unit
def test_filters_combine_across_attributes(seed) -> None:
    country = seed.field("Country")
    gender = seed.field("Gender")
    match = seed.user("match")
    partial = seed.user("partial")
    seed.value(match, country, "USA")
    seed.value(match, gender, "Female")
    seed.value(partial, country, "USA")
    seed.value(partial, gender, "Male")

    params = AttributeFilterParams(country="USA", gender="female")

    assert _usernames(_composer(), params) == ["match"]


@pytest.mark.unit
def test_compose_is_idempotent(seed) -> None:
    country = seed.field("Country")
    for index in range(4):
        account = seed.user(f"user{index}")
        seed.value(account, country, "USA" if index % 2 else "Canada")

    composer = _composer()
    params = AttributeFilterParams(country="usa")

    assert _usernames(composer, params) == _usernames(composer, params) == ["user1", "user3"]


@pytest.mark.unit
def test_build_filter_set_skips_blank_and_unresolved(seed) -> None:
    country = seed.field("Country")
    filter_set = _composer().build_filter_set(
        AttributeFilterParams(country=" USA ", gender="male", listen=" , "),
    )

    assert [item.storage_key for item in filter_set.filters] == [f"user_field_{country.id}"]
    assert filter_set.filters[0].values == ("usa",)


@pytest.mark.unit
def test_multi_value_filter_matches_comma_joined_selection(seed) -> None:
    listen = seed.field("Listen")
    both = seed.user("both")
    seed.user("none")
    seed.value(both, listen, "Rock,Jazz")

    assert _usernames(_composer(), AttributeFilterParams(listen="rock")) == ["both"]
    assert _usernames(_composer(), AttributeFilterParams(listen="jazz,pop")) == ["both"]

from __future__ import annotations

import pytest

from directory_search.constants.directory import GroupVisibility
from directory_search.core.exceptions import AuthorizationError
from directory_search.services.directory.group_guardian import GroupGuardian


def _visible(group_name: str, viewer) -> bool:
    try:
        GroupGuardian().ensure_can_list_members(group_name, viewer)
    except AuthorizationError:
        return False
    return True


@pytest.mark.unit
def test_public_group_is_visible_to_anonymous_viewers(seed) -> None:
    seed.group("everyone")

    assert _visible("everyone", None)


@pytest.mark.unit
def test_logged_on_users_level_requires_authentication(seed) -> None:
    seed.group("logged_in", visibility=GroupVisibility.LOGGED_ON_USERS)
    viewer = seed.user("viewer")

    assert not _visible("logged_in", None)
    assert _visible("logged_in", viewer)


@pytest.mark.unit
def test_members_level_allows_members_and_staff(seed) -> None:
    group = seed.group("club", members_visibility=GroupVisibility.MEMBERS)
    member = seed.user("member")
    moderator = seed.user("moderator", moderator=True)
    outsider = seed.user("outsider")
    seed.membership(group, member)

    assert _visible("club", member)
    assert _visible("club", moderator)
    assert not _visible("club", outsider)


@pytest.mark.unit
def test_staff_and_owner_levels(seed) -> None:
    staff_group = seed.group("staff_only", visibility=GroupVisibility.STAFF)
    owners_group = seed.group("owners_only", visibility=GroupVisibility.OWNERS)
    owner = seed.user("owner")
    member = seed.user("member")
    moderator = seed.user("moderator", moderator=True)
    admin = seed.user("admin", admin=True)
    seed.membership(staff_group, owner, owner=True)
    seed.membership(staff_group, member)
    seed.membership(owners_group, owner, owner=True)

    assert _visible("staff_only", owner)
    assert _visible("staff_only", moderator)
    assert not _visible("staff_only", member)
    assert _visible("owners_only", owner)
    assert not _visible("owners_only", moderator)
    assert _visible("owners_only", admin)

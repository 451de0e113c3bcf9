# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供隔离环境变量、内存 SQLite 应用与数据构造工具.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from directory_search import create_app, db
from directory_search.constants.directory import PeriodType
from directory_search.models.directory_item import DirectoryItem
from directory_search.models.group import Group, GroupUser
from directory_search.models.user import User
from directory_search.models.user_custom_field import UserCustomField
from directory_search.models.user_field import UserField, UserFieldOption
from directory_search.settings import Settings


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - unit tests 只依赖内存 SQLite
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    for name in (
        "USER_SEARCH_ENABLED",
        "USER_SEARCH_MIN_TRUST_LEVEL",
        "USER_SEARCH_GENDER_FIELD_NAME",
        "USER_SEARCH_COUNTRY_FIELD_NAME",
        "USER_SEARCH_LISTEN_FIELD_NAME",
        "USER_SEARCH_SHARE_FIELD_NAME",
        "ENABLE_USER_DIRECTORY",
        "DIRECTORY_PAGE_SIZE",
        "DIRECTORY_PAGE_LIMIT",
        "DIRECTORY_ACTIVE_COLUMNS",
        "ENABLE_DEBUG_LOG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def app():
    """创建测试应用实例并建表."""
    app = create_app(settings=Settings.load())
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


class SeedData:
    """测试数据构造工具,所有方法直接写库并返回 ORM 对象."""

    def __init__(self) -> None:
        self._now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

    def user(self, username: str, **overrides) -> User:
        values = {
            "username": username,
            "username_lower": username.lower(),
            "name": None,
            "active": True,
            "staged": False,
            "trust_level": 1,
            "created_at": self._now,
        }
        values.update(overrides)
        user = User(**values)
        db.session.add(user)
        db.session.commit()
        return user

    def field(self, name: str, options: tuple[str, ...] = ()) -> UserField:
        field = UserField(name=name, field_type="dropdown", searchable=True)
        db.session.add(field)
        db.session.flush()
        for value in options:
            db.session.add(UserFieldOption(user_field_id=field.id, value=value))
        db.session.commit()
        return field

    def value(self, user: User, field: UserField, value: str | None) -> UserCustomField:
        row = UserCustomField(user_id=user.id, name=f"user_field_{field.id}", value=value)
        db.session.add(row)
        db.session.commit()
        return row

    def directory_item(self, user: User, period: PeriodType = PeriodType.WEEKLY, **stats) -> DirectoryItem:
        item = DirectoryItem(user_id=user.id, period_type=int(period), updated_at=self._now, **stats)
        db.session.add(item)
        db.session.commit()
        return item

    def group(self, name: str, *, visibility: int = 0, members_visibility: int = 0) -> Group:
        group = Group(name=name, visibility_level=visibility, members_visibility_level=members_visibility)
        db.session.add(group)
        db.session.commit()
        return group

    def membership(self, group: Group, user: User, *, owner: bool = False) -> GroupUser:
        membership = GroupUser(group_id=group.id, user_id=user.id, owner=owner)
        db.session.add(membership)
        db.session.commit()
        return membership


@pytest.fixture
def seed(app):
    """数据构造工具(依赖已建表的应用上下文)."""
    return SeedData()

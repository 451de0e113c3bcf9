"""用户目录 Repository.

职责:
- 负责目录查询的各个阶段: 周期基础集、群组范围、排除、排序、分页
- 不做序列化、不返回 Response、不 commit
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from sqlalchemy import false, func
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from directory_search import db
from directory_search.constants.directory import ORDER_JOINED, ORDER_LAST_SEEN, ORDER_USERNAME
from directory_search.models.directory_item import DirectoryItem
from directory_search.models.user import User
from directory_search.repositories.groups_repository import GroupsRepository
from directory_search.repositories.user_field_values import LatestFieldValueProjection, normalized_column


class DirectoryItemsRepository:
    """目录统计行查询 Repository."""

    def __init__(self, groups_repository: GroupsRepository | None = None) -> None:
        self._groups = groups_repository or GroupsRepository()

    @staticmethod
    def base_query(period_type: int) -> Query[Any]:
        """指定周期的目录行,已关联 users 表."""
        query: Query[Any] = cast(Query[Any], DirectoryItem.query)
        return query.join(User, cast(ColumnElement[int], User.id) == DirectoryItem.user_id).filter(
            cast(ColumnElement[int], DirectoryItem.period_type) == int(period_type),
        )

    def apply_group_scope(self, query: Query[Any], group_id: int) -> Query[Any]:
        user_id_column = cast(ColumnElement[int], DirectoryItem.user_id)
        return query.filter(user_id_column.in_(self._groups.member_ids_select(group_id)))

    def apply_exclude_groups(self, query: Query[Any], group_names: list[str]) -> Query[Any]:
        if not group_names:
            return query
        user_id_column = cast(ColumnElement[int], DirectoryItem.user_id)
        return query.filter(~user_id_column.in_(self._groups.members_of_named_groups_select(group_names)))

    @staticmethod
    def apply_exclude_usernames(query: Query[Any], usernames: list[str]) -> Query[Any]:
        """按小写用户名排除."""
        normalized = [name.strip().lower() for name in usernames if name and name.strip()]
        if not normalized:
            return query
        return query.filter(cast(ColumnElement[str], User.username_lower).notin_(normalized))

    @staticmethod
    def restrict_to_users(query: Query[Any], user_ids: list[int]) -> Query[Any]:
        if not user_ids:
            return query.filter(false())
        return query.filter(cast(ColumnElement[int], DirectoryItem.user_id).in_(user_ids))

    @staticmethod
    def has_any_user(query: Query[Any], user_ids: list[int]) -> bool:
        if not user_ids:
            return False
        scoped = query.filter(cast(ColumnElement[int], DirectoryItem.user_id).in_(user_ids))
        return bool(db.session.query(scoped.order_by(None).exists()).scalar())

    @staticmethod
    def apply_builtin_ordering(query: Query[Any], order: str, *, ascending: bool) -> Query[Any]:
        """按 last_seen/joined/username 或统计列排序,空值始终排在最后."""
        builtin_columns: dict[str, ColumnElement[Any]] = {
            ORDER_LAST_SEEN: cast(ColumnElement[Any], User.last_seen_at),
            ORDER_JOINED: cast(ColumnElement[Any], User.created_at),
            ORDER_USERNAME: cast(ColumnElement[Any], User.username_lower),
        }
        order_column = builtin_columns.get(order)
        if order_column is None:
            order_column = cast(ColumnElement[Any], getattr(DirectoryItem, order))
        return query.order_by(
            order_column.is_(None),
            order_column.asc() if ascending else order_column.desc(),
        )

    @staticmethod
    def apply_attribute_ordering(query: Query[Any], storage_key: str, *, ascending: bool) -> Query[Any]:
        """按自定义字段最新取值排序,无取值的账户排在最后."""
        projection = LatestFieldValueProjection(storage_key).subquery()
        value_column = normalized_column(projection.c.value)
        return query.outerjoin(projection, projection.c.user_id == DirectoryItem.user_id).order_by(
            projection.c.value.is_(None),
            value_column.asc() if ascending else value_column.desc(),
        )

    @staticmethod
    def apply_tie_breaker(query: Query[Any]) -> Query[Any]:
        return query.order_by(cast(ColumnElement[int], DirectoryItem.id).asc())

    @staticmethod
    def count(query: Query[Any]) -> int:
        return int(query.order_by(None).count() or 0)

    @staticmethod
    def fetch_page(query: Query[Any], *, limit: int, offset: int) -> list[DirectoryItem]:
        return list(query.limit(limit).offset(offset).all())

    @staticmethod
    def find_user_entry(query: Query[Any], user_id: int) -> DirectoryItem | None:
        """在已收窄的查询中查找指定用户的目录行."""
        scoped = query.filter(cast(ColumnElement[int], DirectoryItem.user_id) == user_id)
        return cast("DirectoryItem | None", scoped.first())

    @staticmethod
    def last_updated_at(period_type: int) -> datetime | None:
        query: Query[Any] = cast(Query[Any], db.session.query(func.max(DirectoryItem.updated_at)))
        return query.filter(cast(ColumnElement[int], DirectoryItem.period_type) == int(period_type)).scalar()

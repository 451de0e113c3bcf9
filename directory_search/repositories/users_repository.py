"""用户 Repository.

职责:
- 负责 Query 组装与数据库读取
- 不做序列化、不返回 Response、不 commit
"""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import case
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from directory_search import db
from directory_search.models.user import User


class UsersRepository:
    """用户查询 Repository."""

    @staticmethod
    def find_id_by_username(username: str | None) -> int | None:
        """按小写用户名精确查找用户 ID."""
        normalized = (username or "").strip().lower()
        if not normalized:
            return None
        query: Query[Any] = cast(Query[Any], db.session.query(User.id))
        row = query.filter(cast(ColumnElement[str], User.username_lower) == normalized).first()
        return int(row[0]) if row else None

    @staticmethod
    def search_candidate_ids(term: str | None, *, limit: int) -> list[int]:
        """按用户名前缀或显示名子串查找候选用户(包含占位账户).

        精确匹配用户名的账户排在最前,其余按最近活跃时间倒序,结果数量受 ``limit`` 限制.
        """
        normalized = (term or "").strip().lower().lstrip("@")
        if not normalized or limit <= 0:
            return []

        username_lower_column = cast(ColumnElement[str], User.username_lower)
        name_column = cast(ColumnElement[str], User.name)
        last_seen_column = cast(ColumnElement[Any], User.last_seen_at)

        query: Query[Any] = cast(Query[Any], db.session.query(User.id))
        rows = (
            query.filter(
                username_lower_column.startswith(normalized, autoescape=True)
                | name_column.ilike(f"%{_escape_like(normalized)}%", escape="/"),
            )
            .order_by(
                case((username_lower_column == normalized, 0), else_=1),
                last_seen_column.is_(None),
                last_seen_column.desc(),
                cast(ColumnElement[int], User.id).asc(),
            )
            .limit(limit)
            .all()
        )
        return [int(user_id) for (user_id,) in rows]


def _escape_like(value: str) -> str:
    return value.replace("/", "//").replace("%", "/%").replace("_", "/_")

"""自定义字段定义 Repository."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from directory_search import db
from directory_search.models.user_field import UserField, UserFieldOption


class UserFieldsRepository:
    """自定义字段定义与可选值查询."""

    @staticmethod
    def fetch_ids_by_name() -> dict[str, int]:
        """返回字段名到定义 ID 的映射,同名字段以 ID 较大者为准."""
        query: Query[Any] = cast(
            Query[Any],
            db.session.query(UserField.id, UserField.name),
        )
        rows = query.order_by(cast(ColumnElement[int], UserField.id).asc()).all()
        return {str(name): int(field_id) for field_id, name in rows}

    @staticmethod
    def list_option_values(field_id: int) -> list[str]:
        """按 ID 顺序返回字段可选值."""
        query: Query[Any] = cast(Query[Any], db.session.query(UserFieldOption.value))
        rows = (
            query.filter(cast(ColumnElement[int], UserFieldOption.user_field_id) == field_id)
            .order_by(cast(ColumnElement[int], UserFieldOption.id).asc())
            .all()
        )
        return [str(value) for (value,) in rows]

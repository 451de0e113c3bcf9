"""自定义字段取值投影与筛选谓词.

同一 (user_id, name) 在 user_custom_fields 中可能有多行历史记录.
这里统一采用"最新一行为准"(id 最大者)的口径:

- `LatestFieldValueProjection` 将某个存储键物化为 (user_id, value) 投影,每个用户至多一行;
- 筛选谓词是针对投影的 EXISTS 子查询,排序使用对投影的 LEFT OUTER JOIN,
  两者都不会放大结果行数.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import String, exists, func, literal, or_, type_coerce
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from directory_search import db
from directory_search.models.user_custom_field import UserCustomField

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.sql.selectable import Subquery


def normalize_value(value: object) -> str:
    """去除首尾空白并转为小写,None 视为空串."""
    if value is None:
        return ""
    return str(value).strip().lower()


def normalize_values(values: Iterable[object]) -> tuple[str, ...]:
    """规范化候选值: 去空白、转小写、丢弃空值并保序去重."""
    normalized = (normalize_value(value) for value in values)
    return tuple(dict.fromkeys(value for value in normalized if value))


def normalized_column(column: ColumnElement[Any]) -> ColumnElement[str]:
    """数据库侧与 `normalize_value` 等价的表达式."""
    return func.lower(func.trim(column))


def delimited_members_column(column: ColumnElement[Any]) -> ColumnElement[str]:
    """将逗号分隔的取值规范为 `,a,b,` 形式,便于按整项匹配.

    分隔符两侧的单个空格会被去除,例如 `Rock, Jazz` 变为 `,rock,jazz,`.
    """
    compact = func.replace(func.replace(normalized_column(column), ", ", ","), " ,", ",")
    return literal(",", String) + type_coerce(compact, String) + literal(",", String)


class LatestFieldValueProjection:
    """单个存储键的"最新取值"投影.

    Attributes:
        storage_key: user_custom_fields.name 的取值,例如 `user_field_7`.

    """

    def __init__(self, storage_key: str) -> None:
        self.storage_key = storage_key

    def subquery(self) -> Subquery:
        """构建 (user_id, value) 子查询,每个用户一行."""
        row_id_column = cast(ColumnElement[int], UserCustomField.id)
        user_id_column = cast(ColumnElement[int], UserCustomField.user_id)
        name_column = cast(ColumnElement[str], UserCustomField.name)
        value_column = cast(ColumnElement[str], UserCustomField.value)

        latest_rows: Query[Any] = cast(
            Query[Any],
            db.session.query(
                user_id_column.label("user_id"),
                func.max(row_id_column).label("row_id"),
            ),
        )
        latest_ids = latest_rows.filter(name_column == self.storage_key).group_by(user_id_column).subquery()

        projection: Query[Any] = cast(
            Query[Any],
            db.session.query(
                user_id_column.label("user_id"),
                value_column.label("value"),
            ),
        )
        return projection.join(latest_ids, row_id_column == latest_ids.c.row_id).subquery()


def single_value_predicate(
    storage_key: str,
    value: object,
    *,
    user_id_column: ColumnElement[int],
) -> ColumnElement[bool] | None:
    """最新取值等于候选值.候选值为空白时返回 None(不筛选)."""
    normalized = normalize_value(value)
    if not normalized:
        return None
    projection = LatestFieldValueProjection(storage_key).subquery()
    return exists().where(
        projection.c.user_id == user_id_column,
        normalized_column(projection.c.value) == normalized,
    )


def multi_value_predicate(
    storage_key: str,
    values: Iterable[object],
    *,
    user_id_column: ColumnElement[int],
) -> ColumnElement[bool] | None:
    """最新取值中任一逗号分隔项属于候选集合.

    多选字段的最新一行可能只含单个选项,也可能是逗号拼接的多个选项,两种形式都按整项匹配.
    候选集合规范化后为空时返回 None(不筛选).
    """
    normalized = normalize_values(values)
    if not normalized:
        return None
    projection = LatestFieldValueProjection(storage_key).subquery()
    members = delimited_members_column(projection.c.value)
    return exists().where(
        projection.c.user_id == user_id_column,
        or_(*(members.contains(f",{value},", autoescape=True) for value in normalized)),
    )


__all__ = [
    "LatestFieldValueProjection",
    "delimited_members_column",
    "multi_value_predicate",
    "normalize_value",
    "normalize_values",
    "normalized_column",
    "single_value_predicate",
]

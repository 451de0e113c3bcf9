"""用户筛选条件组装.

`UserFilterComposer` 负责两部分条件:
- 基线资格: 已激活、非占位账户、信任等级不低于下限、当前未被封禁;
- 属性筛选: gender/country 为单值,listen/share 为逗号分隔多值,均按最新取值匹配.

未携带或为空白的参数、未配置的字段名称都只是跳过对应维度,从不报错.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol, cast

from sqlalchemy import or_
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from directory_search.constants.user_search import FILTERABLE_ATTRIBUTES, MULTI_VALUE_ATTRIBUTES
from directory_search.core.types.user_search import AttributeFilter, AttributeFilterParams, AttributeFilterSet
from directory_search.models.user import User
from directory_search.repositories.user_field_values import (
    multi_value_predicate,
    normalize_value,
    normalize_values,
    single_value_predicate,
)
from directory_search.utils.payload_converters import as_list_of_str
from directory_search.utils.structlog_config import log_debug
from directory_search.utils.time_utils import time_utils


class StorageKeyResolver(Protocol):
    def resolve(self, name: str | None) -> str | None: ...


class UserFilterComposer:
    """组装基线资格与属性筛选条件.

    Args:
        resolver: 字段名称解析器(每请求一个实例).
        field_names: 可筛选属性到字段名称的映射.
        min_trust_level: 基线信任等级下限.
        now: 当前时间来源,封禁判断在组装时求值.

    """

    def __init__(
        self,
        resolver: StorageKeyResolver,
        *,
        field_names: dict[str, str],
        min_trust_level: int,
        now: Callable[[], datetime] = time_utils.now,
    ) -> None:
        self._resolver = resolver
        self._field_names = dict(field_names)
        self._min_trust_level = int(min_trust_level)
        self._now = now

    def build_filter_set(self, params: AttributeFilterParams) -> AttributeFilterSet:
        """解析请求参数为不可变的筛选集合,跳过空白参数与未配置字段."""
        filters: list[AttributeFilter] = []
        for attribute in FILTERABLE_ATTRIBUTES:
            raw_value = params.get(attribute)
            if raw_value is None or not raw_value.strip():
                continue

            multi = attribute in MULTI_VALUE_ATTRIBUTES
            if multi:
                values = normalize_values(as_list_of_str(raw_value))
            else:
                single = normalize_value(raw_value)
                values = (single,) if single else ()
            if not values:
                continue

            storage_key = self._resolver.resolve(self._field_names.get(attribute))
            if storage_key is None:
                continue

            filters.append(AttributeFilter(attribute=attribute, storage_key=storage_key, values=values, multi=multi))
        return AttributeFilterSet(filters=tuple(filters))

    def baseline_criteria(self) -> list[ColumnElement[bool]]:
        """基线资格条件,封禁截止时间与调用时刻比较."""
        suspended_till_column = cast(ColumnElement[datetime], User.suspended_till)
        return [
            cast(ColumnElement[bool], User.active).is_(True),
            cast(ColumnElement[bool], User.staged).is_(False),
            cast(ColumnElement[int], User.trust_level) >= self._min_trust_level,
            or_(suspended_till_column.is_(None), suspended_till_column < self._now()),
        ]

    @staticmethod
    def attribute_criteria(
        filter_set: AttributeFilterSet,
        *,
        user_id_column: ColumnElement[int],
    ) -> list[ColumnElement[bool]]:
        criteria: list[ColumnElement[bool]] = []
        for item in filter_set.filters:
            if item.multi:
                predicate = multi_value_predicate(item.storage_key, item.values, user_id_column=user_id_column)
            else:
                predicate = single_value_predicate(item.storage_key, item.values[0], user_id_column=user_id_column)
            if predicate is not None:
                criteria.append(predicate)
        return criteria

    def compose(
        self,
        query: Query[Any],
        params: AttributeFilterParams,
        *,
        user_id_column: ColumnElement[int] | None = None,
    ) -> Query[Any]:
        """对已包含 users 表的查询追加基线与属性筛选.

        Args:
            query: 基础查询,FROM 中必须包含 users.
            params: 原始属性筛选参数.
            user_id_column: 与取值投影关联的用户 ID 列,默认为 users.id.

        Returns:
            追加条件后的查询.

        """
        resolved_user_id = user_id_column if user_id_column is not None else cast(ColumnElement[int], User.id)
        filter_set = self.build_filter_set(params)
        query = query.filter(*self.baseline_criteria())
        attribute_criteria = self.attribute_criteria(filter_set, user_id_column=resolved_user_id)
        if attribute_criteria:
            query = query.filter(*attribute_criteria)

        log_debug(
            "用户筛选条件已组装",
            module="user_search",
            min_trust_level=self._min_trust_level,
            attributes=[item.attribute for item in filter_set.filters],
        )
        return query


__all__ = ["StorageKeyResolver", "UserFilterComposer"]

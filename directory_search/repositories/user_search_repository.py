"""高级检索 Repository."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from directory_search import db
from directory_search.constants.user_search import SEARCH_ORDER_CREATED, SEARCH_ORDER_LAST_SEEN
from directory_search.core.types.listing import PaginatedResult
from directory_search.core.types.user_search import UserSearchFilters
from directory_search.models.user import User
from directory_search.repositories.user_filters import UserFilterComposer


class UserSearchRepository:
    """在全部合格账户上执行属性筛选与分页."""

    def search(self, filters: UserSearchFilters, composer: UserFilterComposer) -> PaginatedResult[User]:
        id_column = cast(ColumnElement[int], User.id)

        # 先对合格账户 ID 去重,再在外层排序分页,避免 DISTINCT 与 ORDER BY 表达式冲突.
        eligible: Query[Any] = cast(Query[Any], db.session.query(id_column.label("id")))
        eligible_ids = composer.compose(eligible, filters.attributes).distinct().subquery()

        query: Query[Any] = cast(Query[Any], User.query)
        query = query.filter(id_column.in_(select(eligible_ids.c.id)))

        total = int(query.count() or 0)
        query = self._apply_sorting(query, filters)
        items = list(query.limit(filters.per_page).offset(filters.offset).all())
        pages = (total + filters.per_page - 1) // filters.per_page if filters.per_page else 0
        return PaginatedResult(
            items=items,
            total=total,
            page=filters.page,
            pages=pages,
            limit=filters.per_page,
        )

    @staticmethod
    def _apply_sorting(query: Query[Any], filters: UserSearchFilters) -> Query[Any]:
        sortable_fields: dict[str, ColumnElement[Any]] = {
            SEARCH_ORDER_CREATED: cast(ColumnElement[Any], User.created_at),
            SEARCH_ORDER_LAST_SEEN: cast(ColumnElement[Any], User.last_seen_at),
        }
        order_column = sortable_fields.get(filters.order, cast(ColumnElement[Any], User.username_lower))
        return query.order_by(
            order_column.is_(None),
            order_column.asc() if filters.asc else order_column.desc(),
            cast(ColumnElement[int], User.id).asc(),
        )

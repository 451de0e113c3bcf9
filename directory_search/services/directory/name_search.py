"""目录的按名称检索阶段."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from directory_search.repositories.directory_items_repository import DirectoryItemsRepository
from directory_search.repositories.users_repository import UsersRepository
from directory_search.utils.structlog_config import log_debug

if TYPE_CHECKING:
    from sqlalchemy.orm import Query

    from directory_search.models.user import User


class DirectoryNameSearch:
    """将 name/username 参数转换为用户 ID 范围.

    - name: 有界候选集(用户名前缀或显示名子串);候选为空时结果为空.
      只要候选中有人出现在当前结果范围内,查看者本人也会被纳入.
    - username: 按小写用户名精确匹配,未知用户名结果为空.
    """

    def __init__(
        self,
        *,
        candidate_limit: int,
        users_repository: UsersRepository | None = None,
        items_repository: DirectoryItemsRepository | None = None,
    ) -> None:
        self._candidate_limit = candidate_limit
        self._users = users_repository or UsersRepository()
        self._items = items_repository or DirectoryItemsRepository()

    def apply_name(self, query: Query[Any], name: str | None, viewer: User | None) -> Query[Any]:
        if not name:
            return query
        user_ids = self._users.search_candidate_ids(name, limit=self._candidate_limit)
        if user_ids and viewer is not None and int(viewer.id) not in user_ids:
            if self._items.has_any_user(query, user_ids):
                user_ids = [*user_ids, int(viewer.id)]
        log_debug("目录名称检索候选", module="directory", candidates=len(user_ids))
        return self._items.restrict_to_users(query, user_ids)

    def apply_username(self, query: Query[Any], username: str | None) -> Query[Any]:
        if not username:
            return query
        user_id = self._users.find_id_by_username(username)
        return self._items.restrict_to_users(query, [user_id] if user_id is not None else [])

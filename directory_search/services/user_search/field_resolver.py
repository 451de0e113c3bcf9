"""自定义字段名称解析.

每个请求构造一个解析器实例,首次解析时加载全部 名称→ID 映射并缓存在实例上,
同一请求内的多次筛选/排序共享这份缓存,不跨请求复用.
"""

from __future__ import annotations

from directory_search.constants.user_search import storage_key_for
from directory_search.repositories.user_fields_repository import UserFieldsRepository
from directory_search.utils.structlog_config import log_debug


class UserFieldResolver:
    """将配置的字段名称解析为存储键."""

    def __init__(self, repository: UserFieldsRepository | None = None) -> None:
        self._repository = repository or UserFieldsRepository()
        self._ids_by_name: dict[str, int] | None = None

    def resolve_id(self, name: str | None) -> int | None:
        """返回字段定义 ID,名称为空或未知时返回 None."""
        normalized = (name or "").strip()
        if not normalized:
            return None
        if self._ids_by_name is None:
            self._ids_by_name = self._repository.fetch_ids_by_name()
        field_id = self._ids_by_name.get(normalized)
        if field_id is None:
            log_debug("自定义字段未配置", module="user_search", field_name=normalized)
        return field_id

    def resolve(self, name: str | None) -> str | None:
        """返回 `user_field_<id>` 形式的存储键,未匹配时返回 None."""
        field_id = self.resolve_id(name)
        if field_id is None:
            return None
        return storage_key_for(field_id)

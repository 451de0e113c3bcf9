"""用户高级检索 Service.

职责:
- 校验功能开关
- 组装筛选条件并调用 repository 分页查询
- 将 ORM 对象转换为卡片 DTO
"""

from __future__ import annotations

from directory_search.core.exceptions import NotFoundError
from directory_search.core.types.listing import PaginatedResult
from directory_search.core.types.user_search import UserCardItem, UserSearchFilters
from directory_search.repositories.user_search_repository import UserSearchRepository
from directory_search.services.site_settings import SearchSiteSettings
from directory_search.services.user_search.field_resolver import UserFieldResolver
from directory_search.services.user_search.filter_composer_factory import build_filter_composer
from directory_search.services.user_search.user_cards import to_user_card
from directory_search.utils.structlog_config import log_info


class UserSearchService:
    """高级检索业务编排."""

    def __init__(
        self,
        repository: UserSearchRepository | None = None,
        *,
        settings: SearchSiteSettings | None = None,
        resolver: UserFieldResolver | None = None,
    ) -> None:
        self._repository = repository or UserSearchRepository()
        self._settings = settings
        self._resolver = resolver

    def search(self, filters: UserSearchFilters) -> PaginatedResult[UserCardItem]:
        settings = self._settings or SearchSiteSettings.current()
        if not settings.user_search_enabled:
            raise NotFoundError(message_key="USER_SEARCH_DISABLED")

        composer = build_filter_composer(settings, self._resolver)
        page_result = self._repository.search(filters, composer)
        log_info(
            "高级检索完成",
            module="user_search",
            page=filters.page,
            per_page=filters.per_page,
            order=filters.order,
            total=page_result.total,
        )
        return PaginatedResult(
            items=[to_user_card(user) for user in page_result.items],
            total=page_result.total,
            page=page_result.page,
            pages=page_result.pages,
            limit=page_result.limit,
        )

"""用户目录列表 Service.

单次请求的处理顺序:
1. 校验功能开关与统计周期;
2. 群组范围(含可见性校验)与 exclude_groups;
3. 基线资格与 hb_* 属性筛选(仅在高级检索启用时);
4. exclude_usernames;
5. 排序(内置键 / 统计列 / 自定义字段),末尾追加 id 升序;
6. name / username 检索;
7. 先计数后分页;
8. 首页置顶当前用户;
9. 构造续页链接.
任一阶段抛出的错误都直接终止请求,不返回部分结果.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from directory_search.constants.directory import (
    DEFAULT_DIRECTORY_ORDER,
    DIRECTORY_ITEMS_PATH,
    EXCLUDE_GROUPS_SEPARATOR,
    ORDER_JOINED,
    ORDER_LAST_SEEN,
    ORDER_USERNAME,
    PINNING_FORBIDDEN_ORDERS,
    PeriodType,
)
from directory_search.core.exceptions import AuthorizationError, ValidationError
from directory_search.core.types.directory import DirectoryListFilters, DirectoryListItem, DirectoryListResult
from directory_search.repositories.directory_items_repository import DirectoryItemsRepository
from directory_search.services.directory.group_guardian import GroupGuardian
from directory_search.services.directory.load_more_link import build_load_more_link
from directory_search.services.directory.name_search import DirectoryNameSearch
from directory_search.services.site_settings import SearchSiteSettings
from directory_search.services.user_search.field_resolver import UserFieldResolver
from directory_search.services.user_search.filter_composer_factory import build_filter_composer
from directory_search.services.user_search.user_cards import to_user_card
from directory_search.utils.payload_converters import as_list_of_str
from directory_search.utils.structlog_config import log_debug, log_info
from directory_search.utils.time_utils import time_utils

if TYPE_CHECKING:
    from sqlalchemy.orm import Query

    from directory_search.models.directory_item import DirectoryItem
    from directory_search.models.user import User

_BUILTIN_ORDERS = frozenset({ORDER_LAST_SEEN, ORDER_JOINED, ORDER_USERNAME})


class DirectoryItemsService:
    """用户目录列表业务编排."""

    def __init__(
        self,
        repository: DirectoryItemsRepository | None = None,
        *,
        settings: SearchSiteSettings | None = None,
        resolver: UserFieldResolver | None = None,
        guardian: GroupGuardian | None = None,
        name_search: DirectoryNameSearch | None = None,
    ) -> None:
        self._repository = repository or DirectoryItemsRepository()
        self._settings = settings
        self._resolver = resolver
        self._guardian = guardian
        self._name_search = name_search

    def list_items(self, filters: DirectoryListFilters, *, viewer: User | None = None) -> DirectoryListResult:
        """返回目录的一页.

        Args:
            filters: 已校验的请求参数.
            viewer: 当前登录用户,匿名访问时为 None.

        Returns:
            当前页条目、总数、统计更新时间与续页链接.

        Raises:
            AuthorizationError: 目录未启用或群组不可见.
            ValidationError: 统计周期未知或群组不存在.

        """
        settings = self._settings or SearchSiteSettings.current()
        if not settings.directory_enabled:
            raise AuthorizationError(message_key="USER_DIRECTORY_DISABLED")

        period_type = PeriodType.from_name(filters.period)
        if period_type is None:
            raise ValidationError(message_key="INVALID_PERIOD", extra={"period": filters.period})

        # 同一请求内的筛选与排序共享一个解析器缓存
        resolver = self._resolver or UserFieldResolver()
        query = self._repository.base_query(period_type)

        if filters.group:
            guardian = self._guardian or GroupGuardian()
            group = guardian.ensure_can_list_members(filters.group, viewer)
            query = self._repository.apply_group_scope(query, int(group.id))

        query = self._repository.apply_exclude_groups(
            query,
            as_list_of_str(filters.exclude_groups, separator=EXCLUDE_GROUPS_SEPARATOR),
        )

        attribute_filters_active = False
        if settings.user_search_enabled:
            composer = build_filter_composer(settings, resolver)
            attribute_filters_active = not composer.build_filter_set(filters.attributes).is_empty
            query = composer.compose(query, filters.attributes)

        query = self._repository.apply_exclude_usernames(query, as_list_of_str(filters.exclude_usernames))

        order = (filters.order or "").strip() or DEFAULT_DIRECTORY_ORDER
        query = self._apply_ordering(query, order, ascending=filters.ascending, settings=settings, resolver=resolver)

        name_search = self._name_search or DirectoryNameSearch(candidate_limit=settings.name_candidate_limit)
        query = name_search.apply_name(query, filters.name, viewer)
        query = name_search.apply_username(query, filters.username)

        total = self._repository.count(query)
        items = self._repository.fetch_page(query, limit=filters.limit, offset=filters.offset)

        pinned_user_id = None
        if self._should_pin(filters, viewer, attribute_filters_active=attribute_filters_active):
            pinned_user_id = self._pin_viewer(query, items, viewer)

        columns = settings.directory_columns
        result = DirectoryListResult(
            items=[self._to_list_item(item, columns) for item in items],
            total=total,
            last_updated_at=time_utils.to_iso(self._repository.last_updated_at(period_type)),
            load_more_url=build_load_more_link(DIRECTORY_ITEMS_PATH, filters, order=order),
            pinned_user_id=pinned_user_id,
        )
        log_info(
            "目录查询完成",
            module="directory",
            period=period_type.name.lower(),
            page=filters.page,
            order=order,
            total=total,
            returned=len(result.items),
        )
        return result

    def _apply_ordering(
        self,
        query: Query[Any],
        order: str,
        *,
        ascending: bool,
        settings: SearchSiteSettings,
        resolver: UserFieldResolver,
    ) -> Query[Any]:
        if order in _BUILTIN_ORDERS or order in settings.directory_columns:
            query = self._repository.apply_builtin_ordering(query, order, ascending=ascending)
        else:
            storage_key = resolver.resolve(order)
            if storage_key is not None:
                query = self._repository.apply_attribute_ordering(query, storage_key, ascending=ascending)
            else:
                log_debug("未知排序键,仅按条目 ID 排序", module="directory", order=order)
        return self._repository.apply_tie_breaker(query)

    @staticmethod
    def _should_pin(
        filters: DirectoryListFilters,
        viewer: User | None,
        *,
        attribute_filters_active: bool,
    ) -> bool:
        if filters.page != 0 or viewer is None:
            return False
        if filters.group or attribute_filters_active:
            return False
        requested_order = (filters.order or "").strip()
        return requested_order not in PINNING_FORBIDDEN_ORDERS

    def _pin_viewer(self, query: Query[Any], items: list[DirectoryItem], viewer: User | None) -> int | None:
        """当前用户不在本页时将其条目插入首位,返回被置顶的用户 ID."""
        if viewer is None:
            return None
        viewer_id = int(viewer.id)
        if any(int(item.user_id) == viewer_id for item in items):
            return None
        entry = self._repository.find_user_entry(query, viewer_id)
        if entry is None:
            return None
        items.insert(0, entry)
        log_debug("当前用户已置顶", module="directory", user_id=viewer_id)
        return viewer_id

    @staticmethod
    def _to_list_item(item: DirectoryItem, columns: tuple[str, ...]) -> DirectoryListItem:
        return DirectoryListItem(
            id=int(item.id),
            user_id=int(item.user_id),
            user=to_user_card(item.user),
            stats=item.stats(columns),
        )

"""按站点配置构造筛选条件组装器."""

from __future__ import annotations

from directory_search.repositories.user_filters import UserFilterComposer
from directory_search.services.site_settings import SearchSiteSettings
from directory_search.services.user_search.field_resolver import UserFieldResolver


def build_filter_composer(
    settings: SearchSiteSettings,
    resolver: UserFieldResolver | None = None,
) -> UserFilterComposer:
    """构造组装器;未传入解析器时新建一个(缓存只在本次请求内有效)."""
    return UserFilterComposer(
        resolver or UserFieldResolver(),
        field_names=dict(settings.field_names),
        min_trust_level=settings.min_trust_level,
    )

"""目录"加载更多"链接构造.

分两步:
1. 基础链接: 回写周期、排序、群组、排除、名称与分页参数,page 加一;
2. 属性筛选回写: 在基础链接上追加 hb_* 参数.
第二步失败时记录告警并返回基础链接,不影响整个请求.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from directory_search.constants.user_search import DIRECTORY_FILTER_PARAM_PREFIX
from directory_search.core.types.directory import DirectoryListFilters
from directory_search.utils.structlog_config import log_warning


def build_base_link(path: str, filters: DirectoryListFilters, *, order: str) -> str:
    params: list[tuple[str, str]] = [("period", filters.period or "")]
    params.append(("order", filters.order or order))
    if filters.asc is not None:
        params.append(("asc", "true" if filters.asc else "false"))
    optional_params = (
        ("group", filters.group),
        ("exclude_usernames", filters.exclude_usernames),
        ("exclude_groups", filters.exclude_groups),
        ("name", filters.name),
        ("username", filters.username),
    )
    params.extend((key, value) for key, value in optional_params if value)
    params.append(("limit", str(filters.limit)))
    params.append(("page", str(filters.page + 1)))
    return f"{path}?{urlencode(params)}"


def append_attribute_params(url: str, filters: DirectoryListFilters) -> str:
    parts = urlsplit(url)
    query_items = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if not key.startswith(DIRECTORY_FILTER_PARAM_PREFIX)
    ]
    query_items.extend(filters.attributes.to_query_params(prefix=DIRECTORY_FILTER_PARAM_PREFIX).items())
    return urlunsplit(parts._replace(query=urlencode(query_items)))


def build_load_more_link(path: str, filters: DirectoryListFilters, *, order: str) -> str:
    """构造续页链接,属性参数回写失败时退回基础链接."""
    base_link = build_base_link(path, filters, order=order)
    try:
        return append_attribute_params(base_link, filters)
    except ValueError as exc:
        log_warning("续页链接回写筛选参数失败", module="directory", exception=exc, link=base_link)
        return base_link

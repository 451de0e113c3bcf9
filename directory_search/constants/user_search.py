"""用户检索常量."""

from __future__ import annotations

from typing import Final

# 自定义字段在 user_custom_fields.name 中的存储键前缀.
USER_FIELD_PREFIX: Final[str] = "user_field_"

# 可筛选属性(对外名称)与目录接口参数名.
FILTERABLE_ATTRIBUTES: Final[tuple[str, ...]] = ("gender", "country", "listen", "share")
SINGLE_VALUE_ATTRIBUTES: Final[frozenset[str]] = frozenset({"gender", "country"})
MULTI_VALUE_ATTRIBUTES: Final[frozenset[str]] = frozenset({"listen", "share"})
DIRECTORY_FILTER_PARAM_PREFIX: Final[str] = "hb_"
DIRECTORY_FILTER_PARAMS: Final[tuple[str, ...]] = tuple(
    f"{DIRECTORY_FILTER_PARAM_PREFIX}{name}" for name in FILTERABLE_ATTRIBUTES
)

# 高级检索分页与排序.
SEARCH_DEFAULT_PAGE: Final[int] = 1
SEARCH_DEFAULT_PER_PAGE: Final[int] = 30
SEARCH_MAX_PER_PAGE: Final[int] = 100
SEARCH_ORDER_CREATED: Final[str] = "created"
SEARCH_ORDER_LAST_SEEN: Final[str] = "last_seen"
SEARCH_ORDER_USERNAME: Final[str] = "username"


def storage_key_for(field_id: int) -> str:
    """由字段定义 ID 推导存储键."""
    return f"{USER_FIELD_PREFIX}{int(field_id)}"

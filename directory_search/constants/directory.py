"""用户目录常量.

统计周期、统计列、排序键与群组可见性级别.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final


class PeriodType(IntEnum):
    """目录统计周期(与 directory_items.period_type 取值一致)."""

    ALL = 1
    YEARLY = 2
    MONTHLY = 3
    WEEKLY = 4
    DAILY = 5
    QUARTERLY = 6

    @classmethod
    def from_name(cls, name: str | None) -> PeriodType | None:
        """按名称解析周期,未知名称返回 None."""
        normalized = (name or "").strip().upper()
        if not normalized:
            return None
        return cls.__members__.get(normalized)


class GroupVisibility(IntEnum):
    """群组及群组成员列表的可见性级别."""

    PUBLIC = 0
    LOGGED_ON_USERS = 1
    MEMBERS = 2
    STAFF = 3
    OWNERS = 4


DIRECTORY_COLUMNS: Final[tuple[str, ...]] = (
    "likes_received",
    "likes_given",
    "topics_entered",
    "topic_count",
    "post_count",
    "posts_read",
    "days_visited",
)

ORDER_LAST_SEEN: Final[str] = "last_seen"
ORDER_JOINED: Final[str] = "joined"
ORDER_USERNAME: Final[str] = "username"
DEFAULT_DIRECTORY_ORDER: Final[str] = ORDER_LAST_SEEN

# 显式请求这些排序时不置顶当前用户,置顶会打乱其定义的顺序.
PINNING_FORBIDDEN_ORDERS: Final[frozenset[str]] = frozenset({ORDER_LAST_SEEN, ORDER_JOINED, ORDER_USERNAME})

EXCLUDE_GROUPS_SEPARATOR: Final[str] = "|"

DIRECTORY_ITEMS_PATH: Final[str] = "/api/v1/directory_items"

"""用户目录相关类型定义."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from directory_search.core.types.user_search import AttributeFilterParams, UserCardItem


@dataclass(slots=True)
class DirectoryListFilters:
    """目录列表请求参数.

    `asc` 为 None 表示请求未携带该参数;续页链接只回写请求中出现过的参数.
    """

    period: str | None
    page: int
    limit: int
    order: str | None = None
    asc: bool | None = None
    group: str | None = None
    exclude_usernames: str | None = None
    exclude_groups: str | None = None
    name: str | None = None
    username: str | None = None
    attributes: AttributeFilterParams = field(default_factory=AttributeFilterParams)

    @property
    def ascending(self) -> bool:
        return True if self.asc is None else self.asc

    @property
    def offset(self) -> int:
        return self.page * self.limit


@dataclass(slots=True)
class DirectoryListItem:
    """目录单行结构."""

    id: int
    user_id: int
    user: UserCardItem
    stats: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "user_id": self.user_id,
            "user": {
                "id": self.user.id,
                "username": self.user.username,
                "name": self.user.name,
                "trust_level": self.user.trust_level,
                "created_at": self.user.created_at,
                "last_seen_at": self.user.last_seen_at,
            },
        }
        payload.update(self.stats)
        return payload


@dataclass(slots=True)
class DirectoryListResult:
    """目录列表结果."""

    items: list[DirectoryListItem]
    total: int
    last_updated_at: str | None
    load_more_url: str
    pinned_user_id: int | None = None

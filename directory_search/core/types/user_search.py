"""用户检索相关类型定义."""

from __future__ import annotations

from dataclasses import dataclass, field

from directory_search.constants.user_search import FILTERABLE_ATTRIBUTES


@dataclass(frozen=True, slots=True)
class AttributeFilterParams:
    """请求中携带的原始属性筛选参数(未规范化).

    listen/share 为逗号分隔的多值参数.
    """

    gender: str | None = None
    country: str | None = None
    listen: str | None = None
    share: str | None = None

    def get(self, attribute: str) -> str | None:
        """按属性名读取原始参数值."""
        if attribute not in FILTERABLE_ATTRIBUTES:
            return None
        return getattr(self, attribute)

    def to_query_params(self, *, prefix: str = "") -> dict[str, str]:
        """输出非空参数,用于回写到续页链接."""
        params: dict[str, str] = {}
        for name in FILTERABLE_ATTRIBUTES:
            value = self.get(name)
            if value is not None and value.strip():
                params[f"{prefix}{name}"] = value
        return params


@dataclass(frozen=True, slots=True)
class AttributeFilter:
    """单个属性筛选条件(已解析存储键且已规范化候选值)."""

    attribute: str
    storage_key: str
    values: tuple[str, ...]
    multi: bool = False


@dataclass(frozen=True, slots=True)
class AttributeFilterSet:
    """一次请求的属性筛选集合,不可变."""

    filters: tuple[AttributeFilter, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.filters


@dataclass(slots=True)
class UserSearchFilters:
    """高级检索筛选条件."""

    page: int
    per_page: int
    order: str
    asc: bool
    attributes: AttributeFilterParams = field(default_factory=AttributeFilterParams)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(slots=True)
class UserCardItem:
    """用户卡片结构(检索结果与目录条目共用)."""

    id: int
    username: str
    name: str | None
    trust_level: int
    created_at: str | None
    last_seen_at: str | None


@dataclass(slots=True)
class UserSearchOptions:
    """各可筛选属性的可选值."""

    gender: list[str] = field(default_factory=list)
    country: list[str] = field(default_factory=list)
    listen: list[str] = field(default_factory=list)
    share: list[str] = field(default_factory=list)

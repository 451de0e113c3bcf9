"""高级检索 query 参数 schema.

分页参数采用宽松解析: 非法或越界的 page/per_page 回落到默认值或上限, 不报错.
"""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from directory_search.constants.user_search import (
    SEARCH_DEFAULT_PAGE,
    SEARCH_DEFAULT_PER_PAGE,
    SEARCH_MAX_PER_PAGE,
    SEARCH_ORDER_CREATED,
    SEARCH_ORDER_LAST_SEEN,
    SEARCH_ORDER_USERNAME,
)
from directory_search.core.types.user_search import AttributeFilterParams, UserSearchFilters
from directory_search.schemas.base import QuerySchema
from directory_search.utils.payload_converters import as_optional_str

_KNOWN_ORDERS = {SEARCH_ORDER_CREATED, SEARCH_ORDER_LAST_SEEN}


def _parse_lenient_int(value: Any) -> int:
    """无法解析时返回 0,交由调用方套用默认值."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text, 10)
    except ValueError:
        return 0


class UserSearchQuery(QuerySchema):
    """`GET /user-search` 的 query 参数."""

    page: int = SEARCH_DEFAULT_PAGE
    per_page: int = SEARCH_DEFAULT_PER_PAGE
    order: str = SEARCH_ORDER_USERNAME
    asc: bool = True
    gender: str | None = None
    country: str | None = None
    listen: str | None = None
    share: str | None = None

    @field_validator("page", mode="before")
    @classmethod
    def _parse_page(cls, value: Any) -> int:
        parsed = _parse_lenient_int(value)
        return parsed if parsed > 0 else SEARCH_DEFAULT_PAGE

    @field_validator("per_page", mode="before")
    @classmethod
    def _parse_per_page(cls, value: Any) -> int:
        parsed = _parse_lenient_int(value)
        if parsed <= 0:
            return SEARCH_DEFAULT_PER_PAGE
        return min(parsed, SEARCH_MAX_PER_PAGE)

    @field_validator("order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> str:
        cleaned = (as_optional_str(value) or "").lower()
        return cleaned if cleaned in _KNOWN_ORDERS else SEARCH_ORDER_USERNAME

    @field_validator("asc", mode="before")
    @classmethod
    def _parse_asc(cls, value: Any) -> bool:
        # 未携带时升序;携带时只有 "true" 表示升序.
        if value is None:
            return True
        if isinstance(value, bool):
            return value
        return str(value) == "true"

    @field_validator("gender", "country", "listen", "share", mode="before")
    @classmethod
    def _parse_optional_str(cls, value: Any) -> str | None:
        return as_optional_str(value)

    def to_filters(self) -> UserSearchFilters:
        return UserSearchFilters(
            page=self.page,
            per_page=self.per_page,
            order=self.order,
            asc=self.asc,
            attributes=AttributeFilterParams(
                gender=self.gender,
                country=self.country,
                listen=self.listen,
                share=self.share,
            ),
        )

"""用户目录 query 参数 schema.

分页边界依赖站点配置, 通过校验上下文传入:
- `page_size`: limit 的默认值与上限;
- `page_limit`: page 的上限.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from directory_search.core.types.directory import DirectoryListFilters
from directory_search.core.types.user_search import AttributeFilterParams
from directory_search.schemas.base import QuerySchema
from directory_search.schemas.validation import SchemaMessageKeyError
from directory_search.settings import DEFAULT_DIRECTORY_PAGE_LIMIT, DEFAULT_DIRECTORY_PAGE_SIZE
from directory_search.utils.payload_converters import as_bool, as_optional_str


def _context_int(info: ValidationInfo, key: str, default: int) -> int:
    context = info.context or {}
    value = context.get(key, default)
    return int(value)


def _parse_strict_int(value: Any, *, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise SchemaMessageKeyError(f"{field_name} 必须为整数", message_key="INVALID_PAGINATION")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text, 10)
    except ValueError as exc:
        raise SchemaMessageKeyError(f"{field_name} 必须为整数", message_key="INVALID_PAGINATION") from exc


class DirectoryItemsQuery(QuerySchema):
    """`GET /directory_items` 的 query 参数."""

    period: str
    page: int = 0
    limit: int = Field(default=None, validate_default=True)
    order: str | None = None
    asc: bool | None = None
    group: str | None = None
    exclude_usernames: str | None = None
    exclude_groups: str | None = None
    name: str | None = None
    username: str | None = None
    hb_gender: str | None = None
    hb_country: str | None = None
    hb_listen: str | None = None
    hb_share: str | None = None

    @field_validator("period", mode="before")
    @classmethod
    def _parse_period(cls, value: Any) -> str:
        cleaned = as_optional_str(value)
        if cleaned is None:
            raise SchemaMessageKeyError("缺少 period 参数", message_key="INVALID_PERIOD")
        return cleaned.lower()

    @field_validator("page", mode="before")
    @classmethod
    def _parse_page(cls, value: Any, info: ValidationInfo) -> int:
        parsed = _parse_strict_int(value, field_name="page")
        if parsed is None:
            return 0
        page_limit = _context_int(info, "page_limit", DEFAULT_DIRECTORY_PAGE_LIMIT)
        if parsed < 0 or parsed > page_limit:
            raise SchemaMessageKeyError(f"page 必须在 0-{page_limit} 之间", message_key="INVALID_PAGINATION")
        return parsed

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, value: Any, info: ValidationInfo) -> int:
        page_size = _context_int(info, "page_size", DEFAULT_DIRECTORY_PAGE_SIZE)
        parsed = _parse_strict_int(value, field_name="limit")
        if parsed is None:
            return page_size
        if parsed <= 0 or parsed > page_size:
            raise SchemaMessageKeyError(f"limit 必须在 1-{page_size} 之间", message_key="INVALID_PAGINATION")
        return parsed

    @field_validator("asc", mode="before")
    @classmethod
    def _parse_asc(cls, value: Any) -> bool | None:
        # 未携带时保持 None(升序且不回写);false/0/no/off 为降序,其余为升序.
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        return as_bool(value, default=True)

    @field_validator(
        "order",
        "group",
        "exclude_usernames",
        "exclude_groups",
        "name",
        "username",
        "hb_gender",
        "hb_country",
        "hb_listen",
        "hb_share",
        mode="before",
    )
    @classmethod
    def _parse_optional_str(cls, value: Any) -> str | None:
        return as_optional_str(value)

    def to_filters(self) -> DirectoryListFilters:
        return DirectoryListFilters(
            period=self.period,
            page=self.page,
            limit=self.limit,
            order=self.order,
            asc=self.asc,
            group=self.group,
            exclude_usernames=self.exclude_usernames,
            exclude_groups=self.exclude_groups,
            name=self.name,
            username=self.username,
            attributes=AttributeFilterParams(
                gender=self.hb_gender,
                country=self.hb_country,
                listen=self.hb_listen,
                share=self.hb_share,
            ),
        )

"""站点开关的只读视图.

服务层只依赖这里的字段,不直接读取环境变量或 Settings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from flask import current_app

from directory_search.constants.directory import DIRECTORY_COLUMNS
from directory_search.settings import (
    DEFAULT_DIRECTORY_PAGE_LIMIT,
    DEFAULT_DIRECTORY_PAGE_SIZE,
    DEFAULT_NAME_CANDIDATE_LIMIT,
)


@dataclass(frozen=True, slots=True)
class SearchSiteSettings:
    """检索与目录相关的站点配置."""

    user_search_enabled: bool = True
    min_trust_level: int = 0
    field_names: Mapping[str, str] = field(default_factory=dict)
    name_candidate_limit: int = DEFAULT_NAME_CANDIDATE_LIMIT
    directory_enabled: bool = True
    directory_page_size: int = DEFAULT_DIRECTORY_PAGE_SIZE
    directory_page_limit: int = DEFAULT_DIRECTORY_PAGE_LIMIT
    directory_columns: tuple[str, ...] = DIRECTORY_COLUMNS

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> SearchSiteSettings:
        return cls(
            user_search_enabled=bool(config.get("USER_SEARCH_ENABLED", True)),
            min_trust_level=int(config.get("USER_SEARCH_MIN_TRUST_LEVEL", 0)),
            field_names=dict(config.get("USER_SEARCH_FIELD_NAMES") or {}),
            name_candidate_limit=int(config.get("USER_SEARCH_NAME_CANDIDATE_LIMIT", DEFAULT_NAME_CANDIDATE_LIMIT)),
            directory_enabled=bool(config.get("ENABLE_USER_DIRECTORY", True)),
            directory_page_size=int(config.get("DIRECTORY_PAGE_SIZE", DEFAULT_DIRECTORY_PAGE_SIZE)),
            directory_page_limit=int(config.get("DIRECTORY_PAGE_LIMIT", DEFAULT_DIRECTORY_PAGE_LIMIT)),
            directory_columns=tuple(config.get("DIRECTORY_ACTIVE_COLUMNS") or DIRECTORY_COLUMNS),
        )

    @classmethod
    def current(cls) -> SearchSiteSettings:
        """读取当前应用的配置."""
        return cls.from_config(current_app.config)

    def field_name_for(self, attribute: str) -> str | None:
        """可筛选属性对应的自定义字段名称."""
        return self.field_names.get(attribute)

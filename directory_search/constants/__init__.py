"""常量模块。

集中管理系统常量，包括错误消息、HTTP 状态码、目录与检索相关常量等。
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

# 导入目录常量
from .directory import (
    DIRECTORY_COLUMNS,
    GroupVisibility,
    PeriodType,
)

# 导入所有系统常量
from .system_constants import (
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    SuccessMessages,
)

# 导入用户检索常量
from .user_search import FILTERABLE_ATTRIBUTES, USER_FIELD_PREFIX

__all__ = [
    "DIRECTORY_COLUMNS",
    "FILTERABLE_ATTRIBUTES",
    "USER_FIELD_PREFIX",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "GroupVisibility",
    "HttpStatus",
    "PeriodType",
    "SuccessMessages",
]

"""目录检索 - 常量定义模块
统一管理错误分类、严重度与对外文案.
"""

from enum import Enum


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    BUSINESS = "business"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# 错误消息常量
class ErrorMessages:
    """错误消息常量."""

    # 通用错误
    INTERNAL_ERROR = "服务器内部错误"
    VALIDATION_ERROR = "数据验证失败"
    PERMISSION_DENIED = "权限不足"
    RESOURCE_NOT_FOUND = "资源不存在"
    INVALID_REQUEST = "无效的请求"
    AUTHENTICATION_REQUIRED = "请先登录"

    # 业务错误
    USER_SEARCH_DISABLED = "用户检索功能未启用"
    USER_DIRECTORY_DISABLED = "用户目录未启用"
    INVALID_PERIOD = "无效的统计周期"
    INVALID_PAGINATION = "无效的分页参数"
    GROUP_NOT_FOUND = "群组不存在"
    GROUP_NOT_VISIBLE = "无权查看该群组或其成员"


# 成功消息常量
class SuccessMessages:
    """成功消息常量."""

    OPERATION_SUCCESS = "操作成功"
    USER_SEARCH_LISTED = "获取用户检索结果成功"
    USER_SEARCH_OPTIONS_LISTED = "获取筛选选项成功"
    DIRECTORY_ITEMS_LISTED = "获取用户目录成功"


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "SuccessMessages",
]

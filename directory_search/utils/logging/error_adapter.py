"""日志系统使用的增强错误处理辅助方法."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import has_request_context, request
from werkzeug.exceptions import HTTPException

from directory_search.api.error_mapping import map_exception_to_status
from directory_search.constants import HttpStatus
from directory_search.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity
from directory_search.core.exceptions import AppError
from directory_search.utils.logging.context_vars import request_id_var, user_id_var


@dataclass(slots=True)
class ErrorContext:
    """异常发生时采集的上下文信息.

    Attributes:
        error: 捕获的异常对象.
        request: Flask 请求对象,可选.
        error_id: 唯一错误标识符,自动生成.
        timestamp: 错误发生时间戳.
        request_id: 请求 ID,从上下文变量获取.
        user_id: 用户 ID,从上下文变量获取.
        url: 请求 URL.
        method: HTTP 方法.
        extra: 额外的上下文信息字典.

    """

    error: Exception
    request: Any | None = None
    error_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    request_id: str | None = field(default_factory=lambda: request_id_var.get())
    user_id: int | None = field(default_factory=lambda: user_id_var.get())
    url: str | None = None
    method: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def ensure_request(self) -> None:
        """在请求上下文中补齐 URL、方法与客户端信息."""
        if self.request is None and has_request_context():
            self.request = request

        if self.request is not None:
            # 只记录 path,查询串里可能带有用户名等检索条件.
            self.url = getattr(self.request, "path", self.url)
            self.method = getattr(self.request, "method", self.method)
            self.extra.setdefault("ip_address", getattr(self.request, "remote_addr", None))


@dataclass(slots=True)
class ErrorMetadata:
    """用于判定错误分类的元数据."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    message_key: str
    message: str
    recoverable: bool


def derive_error_metadata(error: Exception) -> ErrorMetadata:
    """从异常对象推导错误元数据.

    AppError 直接使用其语义字段;HTTPException 按状态码区分客户端/服务端错误;
    其他异常一律视为系统错误,不向外暴露原始异常文本.

    Args:
        error: 异常对象.

    Returns:
        ErrorMetadata: 完整错误元数据.

    """
    if isinstance(error, AppError):
        return ErrorMetadata(
            status_code=map_exception_to_status(error),
            category=error.category,
            severity=error.severity,
            message_key=error.message_key,
            message=error.message,
            recoverable=error.recoverable,
        )

    if isinstance(error, HTTPException):
        status_code = int(getattr(error, "code", HttpStatus.INTERNAL_SERVER_ERROR) or HttpStatus.INTERNAL_SERVER_ERROR)
        is_server_error = status_code >= HttpStatus.INTERNAL_SERVER_ERROR
        if status_code == HttpStatus.NOT_FOUND:
            message_key = "RESOURCE_NOT_FOUND"
        elif is_server_error:
            message_key = "INTERNAL_ERROR"
        else:
            message_key = "INVALID_REQUEST"
        severity = ErrorSeverity.HIGH if is_server_error else ErrorSeverity.MEDIUM
        return ErrorMetadata(
            status_code=status_code,
            category=ErrorCategory.SYSTEM if is_server_error else ErrorCategory.BUSINESS,
            severity=severity,
            message_key=message_key,
            message=getattr(error, "description", None) or getattr(ErrorMessages, message_key),
            recoverable=not is_server_error,
        )

    return ErrorMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        message_key="INTERNAL_ERROR",
        message=ErrorMessages.INTERNAL_ERROR,
        recoverable=False,
    )


def build_public_context(context: ErrorContext) -> dict[str, Any]:
    """构建可对外暴露的错误上下文信息."""
    context.ensure_request()
    payload: dict[str, Any] = {
        "request_id": context.request_id,
        "user_id": context.user_id,
    }
    if context.url:
        payload["url"] = context.url
    if context.method:
        payload["method"] = context.method
    return payload


def get_error_suggestions(category: ErrorCategory) -> list[str]:
    """根据错误类别获取建议的解决方案."""
    suggestions_map = {
        ErrorCategory.VALIDATION: ["检查输入参数", "根据提示修正请求参数"],
        ErrorCategory.BUSINESS: ["确认功能是否已开启", "联系站点管理员"],
        ErrorCategory.AUTHENTICATION: ["重新登录"],
        ErrorCategory.AUTHORIZATION: ["确认群组可见性设置", "联系站点管理员"],
        ErrorCategory.SYSTEM: ["联系站点管理员", "查看错误日志"],
    }
    return suggestions_map.get(category, ["联系站点管理员", "查看错误日志"])


__all__ = [
    "ErrorContext",
    "ErrorMetadata",
    "build_public_context",
    "derive_error_metadata",
    "get_error_suggestions",
]

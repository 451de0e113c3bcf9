"""路由安全执行与结构化日志助手.

提供 `log_with_context` 与 `safe_route_call` 两个 helper,用于复用结构化日志字段,
并集中处理视图层的异常捕获.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, TypedDict, TypeVar, Unpack, cast

from flask_login import current_user
from werkzeug.exceptions import HTTPException

from directory_search.core.exceptions import AppError, SystemError
from directory_search.utils.structlog_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from directory_search.core.types import ContextDict, LoggerExtra, RouteSafetyOptions

R = TypeVar("R")
LogLevel = Literal["debug", "info", "warning", "error", "critical"]
EXPECTED_EXCEPTIONS: tuple[type[BaseException], ...] = (AppError, HTTPException)


class LogContextOptions(TypedDict, total=False):
    """结构化日志可选参数."""

    context: ContextDict | None
    extra: LoggerExtra | None
    include_actor: bool


def log_with_context(
    level: LogLevel,
    event: str,
    *,
    module: str,
    action: str,
    **options: Unpack[LogContextOptions],
) -> None:
    """记录带有统一上下文字段的结构化日志.

    Args:
        level: 日志级别,使用 structlog 的方法名,例如 "info"、"error".
        event: 日志事件描述.
        module: 所属模块或领域,用于快速过滤.
        action: 当前操作名称,通常对应视图函数名.
        **options: 支持 context、extra、include_actor 选项以扩展日志内容.

    """
    logger = get_logger("app")
    payload: dict[str, Any] = {"module": module, "action": action}

    if options.get("include_actor", True):
        try:
            actor_id = getattr(current_user, "id", None)
        except RuntimeError:
            actor_id = None
        if actor_id is not None:
            payload.setdefault("actor_id", actor_id)

    context_opt = cast("ContextDict | None", options.get("context"))
    extra_opt = cast("LoggerExtra | None", options.get("extra"))
    if context_opt:
        payload.update(context_opt)
    if extra_opt:
        payload.update(extra_opt)

    log_method = getattr(logger, level, logger.error)
    log_method(event, **payload)


def safe_route_call(
    func: Callable[[], R],
    *,
    module: str,
    action: str,
    public_error: str,
    **options: Unpack[RouteSafetyOptions],
) -> R:
    """安全执行视图逻辑,集中处理日志与异常转换.

    预期异常(AppError/HTTPException)以 warning 记录后原样抛出;
    其他异常以 error 记录并包装为 ``fallback_exception(public_error)``.

    Args:
        func: 无参业务函数,通常为捕获请求参数的局部闭包.
        module: 记录日志用的模块名称.
        action: 业务动作名称,例如 "list_directory_items".
        public_error: 暴露给客户端的统一错误文案.
        **options: 支持 context、extra、fallback_exception、log_event、include_actor 等键.

    Returns:
        业务函数的执行结果.

    Raises:
        AppError: 当业务逻辑主动抛出或 fallback_exception 包装时.

    """
    fallback_exception = options.get("fallback_exception", SystemError)
    event = options.get("log_event") or f"{action}执行失败"
    include_actor = options.get("include_actor", True)
    context_payload: ContextDict = dict(cast("ContextDict | None", options.get("context")) or {})
    extra_payload: dict[str, Any] = dict(cast("LoggerExtra | None", options.get("extra")) or {})

    try:
        return func()
    except EXPECTED_EXCEPTIONS as exc:
        log_with_context(
            "warning",
            event,
            module=module,
            action=action,
            context=context_payload,
            extra={**extra_payload, "error_type": exc.__class__.__name__, "error_message": str(exc)},
            include_actor=include_actor,
        )
        raise
    except Exception as exc:
        log_with_context(
            "error",
            event,
            module=module,
            action=action,
            context=context_payload,
            extra={**extra_payload, "error_type": exc.__class__.__name__, "unexpected": True},
            include_actor=include_actor,
        )
        raise fallback_exception(public_error) from exc


__all__ = ["log_with_context", "safe_route_call"]

"""structlog 处理器: DEBUG 过滤."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.typing import BindableLogger

    from directory_search.core.types import StructlogEventDict


class DebugFilter:
    """根据 ENABLE_DEBUG_LOG 决定是否丢弃 DEBUG 事件.

    Attributes:
        enabled: 是否保留 DEBUG 事件.

    """

    def __init__(self, *, enabled: bool = False) -> None:
        self.enabled = enabled

    def set_enabled(self, *, enabled: bool) -> None:
        self.enabled = enabled

    def __call__(
        self,
        _logger: BindableLogger,
        method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """未启用时丢弃 DEBUG 事件.

        Raises:
            structlog.DropEvent: DEBUG 日志未启用.

        """
        level = str(event_dict.get("level") or method_name).upper()
        if level == "DEBUG" and not self.enabled:
            raise structlog.DropEvent
        return event_dict


__all__ = ["DebugFilter"]

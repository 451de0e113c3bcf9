"""查询参数类型转换工具.

提供稳定的转换函数,将 `PayloadValue` 映射为具体的 str/bool/int 类型,
便于 schema 与服务层书写类型安全的逻辑.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from directory_search.core.types.structures import PayloadValue

_STRING_LIKE_TYPES = (str, bytes, bytearray)
TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})
FALSEY_VALUES = frozenset({"false", "0", "no", "off"})


def _unwrap_sequence(value: PayloadValue | None) -> PayloadValue | None:
    if isinstance(value, Sequence) and not isinstance(value, _STRING_LIKE_TYPES):
        if not value:
            return None
        return value[-1]
    return value


def as_str(value: PayloadValue | None, *, default: str = "") -> str:
    """转换为字符串,None 返回默认值."""
    base = _unwrap_sequence(value)
    if base is None:
        return default
    if isinstance(base, str):
        return base
    if isinstance(base, (bytes, bytearray)):
        return base.decode()
    return str(base)


def as_optional_str(value: PayloadValue | None) -> str | None:
    """转换为可选字符串,空白返回 None."""
    cleaned = as_str(value, default="").strip()
    return cleaned or None


def as_bool(value: PayloadValue | None, *, default: bool = False) -> bool:
    """转换为布尔值,无法识别的文本返回默认值."""
    base = _unwrap_sequence(value)
    if base is None:
        return default

    result = default
    if isinstance(base, bool):
        result = base
    elif isinstance(base, (int, float)):
        result = bool(base)
    elif isinstance(base, str):
        normalized = base.strip().lower()
        if normalized in TRUTHY_VALUES:
            result = True
        elif normalized in FALSEY_VALUES:
            result = False
    return result


def as_list_of_str(value: PayloadValue | None, *, separator: str = ",") -> list[str]:
    """转换为字符串列表,按分隔符或序列拆分,丢弃空白项."""
    base = _unwrap_sequence(value)
    if base is None:
        return []
    if isinstance(base, str):
        return [segment.strip() for segment in base.split(separator) if segment.strip()]
    if isinstance(base, Sequence):
        result: list[str] = []
        for item in base:
            normalized = as_optional_str(item)
            if normalized:
                result.append(normalized)
        return result
    cleaned = as_str(base, default="").strip()
    return [cleaned] if cleaned else []

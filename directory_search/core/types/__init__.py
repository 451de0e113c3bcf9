"""共享类型定义."""

from directory_search.core.types.structures import (
    ContextDict,
    ContextValue,
    JsonDict,
    JsonValue,
    LoggerExtra,
    PayloadMapping,
    PayloadValue,
    RouteSafetyOptions,
    ScalarValue,
    StructlogEventDict,
)

__all__ = [
    "ContextDict",
    "ContextValue",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "PayloadMapping",
    "PayloadValue",
    "RouteSafetyOptions",
    "ScalarValue",
    "StructlogEventDict",
]

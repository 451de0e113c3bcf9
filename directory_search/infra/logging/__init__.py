"""请求级日志基础设施."""

from directory_search.infra.logging.request_middleware import register_request_logging

__all__ = ["register_request_logging"]

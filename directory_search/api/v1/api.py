"""Flask-RESTX Api 定制.

将 RestX 内部错误统一映射为 `unified_error_response`,保持 JSON envelope 口径一致.
"""

from __future__ import annotations

from flask import Response, jsonify, request
from flask_restx import Api

from directory_search.utils.response_utils import jsonify_unified_success, unified_error_response
from directory_search.utils.structlog_config import ErrorContext


class DirectorySearchApi(Api):
    """统一错误封套的 RestX Api."""

    def render_root(self) -> Response:  # type: ignore[override]
        """为 `/api/v1/` 提供可发现性入口."""
        prefix = request.path.rstrip("/")
        docs_url = f"{prefix}{self._doc}" if self._doc else None
        response, status_code = jsonify_unified_success(
            data={
                "docs_url": docs_url,
                "openapi_url": f"{prefix}/openapi.json",
                "user_search_url": f"{prefix}/user-search",
                "directory_items_url": f"{prefix}/directory_items",
            },
            message="API v1 已就绪",
        )
        response.status_code = status_code
        return response

    def handle_error(self, e: Exception) -> Response:  # type: ignore[override]
        payload, status_code = unified_error_response(e, context=ErrorContext(e, request))
        response = jsonify(payload)
        response.status_code = status_code
        return response

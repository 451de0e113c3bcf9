"""目录检索 JSON API (Flask-RESTX) 入口.

- `/api/v1/**` 版本化 API blueprint
- 提供 Swagger UI 与 OpenAPI JSON 导出能力
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Flask

    from directory_search.settings import Settings


def register_api_blueprints(app: Flask, settings: Settings) -> None:
    """按 Settings 注册 API blueprints."""
    from directory_search.api.v1 import create_api_v1_blueprint  # noqa: PLC0415

    api_v1_bp = create_api_v1_blueprint(settings)
    app.register_blueprint(api_v1_bp, url_prefix="/api/v1")

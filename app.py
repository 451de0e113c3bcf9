"""目录检索 - 本地开发环境启动文件."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final

# 添加项目根目录到 Python 路径
PROJECT_ROOT: Final[Path] = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from directory_search import create_app, db  # noqa: E402
from directory_search.utils.structlog_config import get_system_logger  # noqa: E402

if TYPE_CHECKING:
    from flask import Flask

os.environ.setdefault("FLASK_APP", "directory_search")
os.environ.setdefault("FLASK_ENV", "development")

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[str] = "5001"
DEFAULT_DEBUG: Final[str] = "true"


def _ensure_sqlite_schema(flask_app: Flask) -> None:
    """本地 SQLite 回退库首次启动时建表, 其他数据库由社区平台维护表结构."""
    database_uri = str(flask_app.config.get("SQLALCHEMY_DATABASE_URI", ""))
    if not database_uri.startswith("sqlite"):
        return
    with flask_app.app_context():
        db.create_all()


def _load_runtime_config() -> tuple[str, int, bool]:
    """读取开发服务器运行参数."""
    host = os.environ.get("FLASK_HOST") or DEFAULT_HOST
    port = int(os.environ.get("FLASK_PORT", DEFAULT_PORT))
    debug = os.environ.get("FLASK_DEBUG", DEFAULT_DEBUG).lower() == "true"
    return host, port, debug


def _log_startup_instructions(host: str, port: int, *, debug: bool) -> None:
    """输出常见的本地访问说明, 便于开发者查阅."""
    logger = get_system_logger()
    logger.info("目录检索开发环境已启动", host=host, port=port, debug=debug)
    logger.info("API 入口", url=f"http://{host}:{port}/api/v1/")
    logger.info("接口文档", url=f"http://{host}:{port}/api/v1/docs")


def main() -> None:
    """启动 Flask 开发服务器并打印辅助信息."""
    app = create_app()
    host, port, debug = _load_runtime_config()
    _ensure_sqlite_schema(app)
    _log_startup_instructions(host, port, debug=debug)

    app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)


if __name__ == "__main__":
    main()

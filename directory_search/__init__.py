"""目录检索 - Flask 应用初始化.

提供按自定义资料字段筛选成员的高级检索接口,以及带统计列的用户目录接口.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from flask import Flask, jsonify, request
from flask.typing import ResponseReturnValue
from flask_cors import CORS
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

from directory_search.settings import Settings
from directory_search.utils.response_utils import unified_error_response
from directory_search.utils.structlog_config import ErrorContext, configure_structlog, enhanced_error_handler

if TYPE_CHECKING:
    from directory_search.models.user import User

# 初始化扩展
db = SQLAlchemy()
login_manager = LoginManager()
cors = CORS()


def create_app(*, settings: Settings | None = None) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    app.config.from_mapping(resolved_settings.to_flask_config())
    configure_security(app, resolved_settings)

    # 初始化扩展
    initialize_extensions(app, resolved_settings)

    # 配置日志
    configure_logging(app)
    configure_structlog(app)
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))

    # 请求上下文需先于蓝图钩子注册
    from directory_search.infra.logging import register_request_logging

    register_request_logging(app)

    # 注册蓝图
    from directory_search.api import register_api_blueprints

    register_api_blueprints(app, resolved_settings)

    app.enhanced_error_handler = enhanced_error_handler

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error, context=ErrorContext(error, request))
        return jsonify(payload), status_code

    return app


def configure_security(app: Flask, settings: Settings) -> None:
    """配置会话安全参数与 Cookie 选项.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,提供会话超时等参数.

    """
    app.config["PERMANENT_SESSION_LIFETIME"] = settings.session_lifetime_seconds
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_NAME"] = "directory_search_session"


def initialize_extensions(app: Flask, settings: Settings) -> None:
    """初始化数据库、登录与 CORS 扩展.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,用于扩展初始化参数注入.

    """
    db.init_app(app)

    login_manager.init_app(app)
    login_manager.session_protection = "basic"

    @login_manager.user_loader
    def load_user(user_id: str) -> "User | None":
        from directory_search.models.user import User

        return db.session.get(User, int(user_id))

    cors.init_app(
        app,
        resources={
            r"/api/*": {
                "origins": list(settings.cors_origins),
                "methods": ["GET", "OPTIONS"],
                "allow_headers": ["Content-Type", "X-Request-ID"],
                "supports_credentials": True,
            },
        },
    )


def configure_logging(app: Flask) -> None:
    """非调试/测试模式下挂载滚动文件日志.

    Args:
        app: Flask 应用实例.

    """
    if app.debug or app.testing:
        return

    log_path = Path(app.config["LOG_FILE"])
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=app.config["LOG_MAX_SIZE"],
        backupCount=app.config["LOG_BACKUP_COUNT"],
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"),
    )
    file_handler.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
    app.logger.addHandler(file_handler)
    app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
    app.logger.info("目录检索应用启动")


from directory_search.models import (  # noqa: F401, E402
    directory_item,
    group,
    user,
    user_custom_field,
    user_field,
)

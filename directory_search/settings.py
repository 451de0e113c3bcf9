"""目录检索 - 统一配置读取与校验.

目标:
- 将环境变量读取、默认值、校验集中到单一入口,避免散落在各模块中重复解析.
- `create_app(settings=...)` 只消费 Settings,不再直接读取环境变量.

说明:
- Settings 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
- 检索与目录的站点开关(USER_SEARCH_* / DIRECTORY_*)同样在此集中校验.
- 生产环境默认更严格: 缺失关键密钥/连接串会直接抛出 ValueError.
"""

from __future__ import annotations

import json
import logging
import secrets
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from directory_search.constants.directory import DIRECTORY_COLUMNS

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_ENVIRONMENT = "development"
APP_VERSION = "0.3.0"

DEFAULT_DB_CONNECTION_TIMEOUT_SECONDS = 30
DEFAULT_DB_MAX_CONNECTIONS = 20
DEFAULT_SQLALCHEMY_POOL_RECYCLE_SECONDS = 300
DEFAULT_SQLALCHEMY_MAX_OVERFLOW = 10

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "userdata/logs/app.log"
DEFAULT_LOG_MAX_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5

DEFAULT_SESSION_LIFETIME_SECONDS = 3600

DEFAULT_CORS_ORIGINS = ("http://localhost:5001", "http://127.0.0.1:5001")

DEFAULT_API_V1_DOCS_ENABLED = True

DEFAULT_USER_SEARCH_ENABLED = True
DEFAULT_USER_SEARCH_MIN_TRUST_LEVEL = 0
DEFAULT_GENDER_FIELD_NAME = "Gender"
DEFAULT_COUNTRY_FIELD_NAME = "Country"
DEFAULT_LISTEN_FIELD_NAME = "Listen"
DEFAULT_SHARE_FIELD_NAME = "Share"
DEFAULT_NAME_CANDIDATE_LIMIT = 200

DEFAULT_ENABLE_USER_DIRECTORY = True
DEFAULT_DIRECTORY_PAGE_SIZE = 50
DEFAULT_DIRECTORY_PAGE_LIMIT = 1000
DEFAULT_DIRECTORY_ACTIVE_COLUMNS = ("all",)

TRUST_LEVEL_MIN = 0
TRUST_LEVEL_MAX = 4
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _parse_csv(raw: str) -> tuple[str, ...]:
    parts = [item.strip() for item in raw.split(",")]
    return tuple(item for item in parts if item)


def _resolve_sqlite_fallback_url() -> str:
    db_path = PROJECT_ROOT / "userdata" / "directory_search_dev.db"
    return f"sqlite:///{db_path.absolute()}"


class Settings(BaseSettings):
    """应用运行时设置集合."""

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
        # CORS_ORIGINS / DIRECTORY_ACTIVE_COLUMNS 使用逗号分隔,关闭自动 JSON 解码,交由 validator 解析.
        enable_decoding=False,
    )

    environment: str = Field(default=DEFAULT_ENVIRONMENT, validation_alias="FLASK_ENV")
    debug: bool = Field(default=False, validation_alias="FLASK_DEBUG")

    app_name: str = Field(default="目录检索", validation_alias="APP_NAME")
    app_version: str = APP_VERSION

    secret_key: str = Field(default="", validation_alias="SECRET_KEY")

    database_url: str = Field(default="", validation_alias="DATABASE_URL")
    db_connection_timeout_seconds: int = Field(
        default=DEFAULT_DB_CONNECTION_TIMEOUT_SECONDS,
        validation_alias="DB_CONNECTION_TIMEOUT",
    )
    db_max_connections: int = Field(default=DEFAULT_DB_MAX_CONNECTIONS, validation_alias="DB_MAX_CONNECTIONS")

    log_level: str = Field(default=DEFAULT_LOG_LEVEL, validation_alias="LOG_LEVEL")
    log_file: str = Field(default=DEFAULT_LOG_FILE, validation_alias="LOG_FILE")
    log_max_size_bytes: int = Field(default=DEFAULT_LOG_MAX_SIZE_BYTES, validation_alias="LOG_MAX_SIZE")
    log_backup_count: int = Field(default=DEFAULT_LOG_BACKUP_COUNT, validation_alias="LOG_BACKUP_COUNT")
    enable_debug_log: bool = Field(default=False, validation_alias="ENABLE_DEBUG_LOG")

    session_lifetime_seconds: int = Field(
        default=DEFAULT_SESSION_LIFETIME_SECONDS,
        validation_alias="PERMANENT_SESSION_LIFETIME",
    )

    cors_origins: tuple[str, ...] = Field(default=DEFAULT_CORS_ORIGINS, validation_alias="CORS_ORIGINS")

    api_v1_docs_enabled: bool = Field(default=DEFAULT_API_V1_DOCS_ENABLED, validation_alias="API_V1_DOCS_ENABLED")

    # 用户检索
    user_search_enabled: bool = Field(default=DEFAULT_USER_SEARCH_ENABLED, validation_alias="USER_SEARCH_ENABLED")
    user_search_min_trust_level: int = Field(
        default=DEFAULT_USER_SEARCH_MIN_TRUST_LEVEL,
        validation_alias="USER_SEARCH_MIN_TRUST_LEVEL",
    )
    user_search_gender_field_name: str = Field(
        default=DEFAULT_GENDER_FIELD_NAME,
        validation_alias="USER_SEARCH_GENDER_FIELD_NAME",
    )
    user_search_country_field_name: str = Field(
        default=DEFAULT_COUNTRY_FIELD_NAME,
        validation_alias="USER_SEARCH_COUNTRY_FIELD_NAME",
    )
    user_search_listen_field_name: str = Field(
        default=DEFAULT_LISTEN_FIELD_NAME,
        validation_alias="USER_SEARCH_LISTEN_FIELD_NAME",
    )
    user_search_share_field_name: str = Field(
        default=DEFAULT_SHARE_FIELD_NAME,
        validation_alias="USER_SEARCH_SHARE_FIELD_NAME",
    )
    user_search_name_candidate_limit: int = Field(
        default=DEFAULT_NAME_CANDIDATE_LIMIT,
        validation_alias="USER_SEARCH_NAME_CANDIDATE_LIMIT",
    )

    # 用户目录
    enable_user_directory: bool = Field(
        default=DEFAULT_ENABLE_USER_DIRECTORY,
        validation_alias="ENABLE_USER_DIRECTORY",
    )
    directory_page_size: int = Field(default=DEFAULT_DIRECTORY_PAGE_SIZE, validation_alias="DIRECTORY_PAGE_SIZE")
    directory_page_limit: int = Field(default=DEFAULT_DIRECTORY_PAGE_LIMIT, validation_alias="DIRECTORY_PAGE_LIMIT")
    directory_active_columns: tuple[str, ...] = Field(
        default=DEFAULT_DIRECTORY_ACTIVE_COLUMNS,
        validation_alias="DIRECTORY_ACTIVE_COLUMNS",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("cors_origins", "directory_active_columns", mode="before")
    @classmethod
    def _parse_csv_values(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return ()
            if raw.startswith("["):
                parsed = json.loads(raw)
                if not isinstance(parsed, list):
                    raise ValueError("must be a JSON array or a comma-separated string")
                return tuple(item for item in (str(v).strip() for v in parsed) if item)
            return _parse_csv(raw)
        if isinstance(value, (list, tuple, set)):
            items = []
            for item in value:
                text = str(item).strip()
                if text:
                    items.append(text)
            return tuple(items)
        return value

    @property
    def field_names(self) -> dict[str, str]:
        """可筛选属性到自定义字段名称的映射."""
        return {
            "gender": self.user_search_gender_field_name,
            "country": self.user_search_country_field_name,
            "listen": self.user_search_listen_field_name,
            "share": self.user_search_share_field_name,
        }

    @property
    def resolved_directory_columns(self) -> tuple[str, ...]:
        """展开 `all` 后的目录统计列."""
        columns = tuple(item.lower() for item in self.directory_active_columns)
        if not columns or "all" in columns:
            return DIRECTORY_COLUMNS
        return tuple(column for column in DIRECTORY_COLUMNS if column in columns)

    @property
    def sqlalchemy_engine_options(self) -> dict[str, object]:
        """生成 SQLAlchemy Engine 配置选项."""
        if self.database_url.startswith("sqlite"):
            return {"pool_pre_ping": True, "connect_args": {"check_same_thread": False}}
        return {
            "pool_pre_ping": True,
            "pool_recycle": DEFAULT_SQLALCHEMY_POOL_RECYCLE_SECONDS,
            "pool_timeout": self.db_connection_timeout_seconds,
            "max_overflow": DEFAULT_SQLALCHEMY_MAX_OVERFLOW,
            "pool_size": self.db_max_connections,
            "echo": bool(self.debug),
        }

    def to_flask_config(self) -> dict[str, object]:
        """转换为 Flask app.config 可写入的配置字典."""
        return {
            "ENV": self.environment,
            "DEBUG": self.debug,
            "APP_NAME": self.app_name,
            "APP_VERSION": self.app_version,
            "SECRET_KEY": self.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "SQLALCHEMY_ENGINE_OPTIONS": dict(self.sqlalchemy_engine_options),
            "LOG_LEVEL": self.log_level,
            "LOG_FILE": self.log_file,
            "LOG_MAX_SIZE": self.log_max_size_bytes,
            "LOG_BACKUP_COUNT": self.log_backup_count,
            "ENABLE_DEBUG_LOG": self.enable_debug_log,
            "PERMANENT_SESSION_LIFETIME": self.session_lifetime_seconds,
            "CORS_ORIGINS": ",".join(self.cors_origins),
            "API_V1_DOCS_ENABLED": self.api_v1_docs_enabled,
            "USER_SEARCH_ENABLED": self.user_search_enabled,
            "USER_SEARCH_MIN_TRUST_LEVEL": self.user_search_min_trust_level,
            "USER_SEARCH_FIELD_NAMES": dict(self.field_names),
            "USER_SEARCH_NAME_CANDIDATE_LIMIT": self.user_search_name_candidate_limit,
            "ENABLE_USER_DIRECTORY": self.enable_user_directory,
            "DIRECTORY_PAGE_SIZE": self.directory_page_size,
            "DIRECTORY_PAGE_LIMIT": self.directory_page_limit,
            "DIRECTORY_ACTIVE_COLUMNS": self.resolved_directory_columns,
        }

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()

    @model_validator(mode="after")
    def _apply_defaults_and_validate(self) -> Settings:
        environment_normalized = self.environment.strip().lower()

        debug = self._resolve_debug(environment_normalized)
        self._ensure_secret_key(debug)
        self._ensure_database_url(environment_normalized)
        self._apply_api_docs_default(environment_normalized)

        self._validate()
        return self

    def _resolve_debug(self, environment_normalized: str) -> bool:
        if "debug" in self.model_fields_set:
            return bool(self.debug)
        debug = environment_normalized != "production"
        object.__setattr__(self, "debug", debug)
        return debug

    def _ensure_secret_key(self, debug: bool) -> None:
        if self.secret_key:
            return
        if not debug:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        object.__setattr__(self, "secret_key", secrets.token_urlsafe(32))
        logger.warning("⚠️  开发环境使用随机生成的SECRET_KEY,生产环境请设置环境变量")

    def _ensure_database_url(self, environment_normalized: str) -> None:
        if self.database_url:
            return
        if environment_normalized == "production":
            raise ValueError("DATABASE_URL environment variable must be set in production")

        object.__setattr__(self, "database_url", _resolve_sqlite_fallback_url())
        if environment_normalized not in {"testing", "test"}:
            logger.warning("⚠️  未设置 DATABASE_URL, 非 production 环境将回退 SQLite")

    def _apply_api_docs_default(self, environment_normalized: str) -> None:
        if environment_normalized != "production":
            return
        if "api_v1_docs_enabled" in self.model_fields_set:
            return
        object.__setattr__(self, "api_v1_docs_enabled", False)

    def _validate(self) -> None:
        """执行跨字段校验,统一抛出可读的 ValueError."""
        errors: list[str] = []
        unknown_columns = [
            column
            for column in (item.lower() for item in self.directory_active_columns)
            if column != "all" and column not in DIRECTORY_COLUMNS
        ]
        blank_field_names = [name for name, value in self.field_names.items() if not value.strip()]
        checks: list[tuple[str, bool]] = [
            ("DB_CONNECTION_TIMEOUT 必须为正整数", self.db_connection_timeout_seconds <= 0),
            ("DB_MAX_CONNECTIONS 必须为正整数", self.db_max_connections <= 0),
            ("PERMANENT_SESSION_LIFETIME 必须为正整数(秒)", self.session_lifetime_seconds <= 0),
            ("LOG_LEVEL 仅支持 DEBUG/INFO/WARNING/ERROR/CRITICAL", self.log_level not in VALID_LOG_LEVELS),
            (
                f"USER_SEARCH_MIN_TRUST_LEVEL 必须为 {TRUST_LEVEL_MIN}-{TRUST_LEVEL_MAX} 的整数",
                self.user_search_min_trust_level < TRUST_LEVEL_MIN
                or self.user_search_min_trust_level > TRUST_LEVEL_MAX,
            ),
            ("USER_SEARCH_NAME_CANDIDATE_LIMIT 必须为正整数", self.user_search_name_candidate_limit <= 0),
            (
                f"USER_SEARCH_*_FIELD_NAME 不能为空: {', '.join(blank_field_names)}",
                bool(blank_field_names),
            ),
            ("DIRECTORY_PAGE_SIZE 必须为正整数", self.directory_page_size <= 0),
            ("DIRECTORY_PAGE_LIMIT 必须为非负整数", self.directory_page_limit < 0),
            (
                f"DIRECTORY_ACTIVE_COLUMNS 包含未知列: {', '.join(unknown_columns)}",
                bool(unknown_columns),
            ),
        ]
        for message, condition in checks:
            if condition:
                errors.append(message)

        if errors:
            joined = "; ".join(errors)
            raise ValueError(f"配置校验失败: {joined}")

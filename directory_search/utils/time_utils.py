"""统一时间处理工具模块.

数据库中的时间可能是无时区的(SQLite)或带时区的(PostgreSQL),统一按 UTC 处理.
"""

from datetime import UTC, datetime


class TimeUtils:
    """统一时间处理工具类."""

    @staticmethod
    def now() -> datetime:
        """获取当前 UTC 时间."""
        return datetime.now(UTC)

    @staticmethod
    def ensure_utc(dt: datetime | None) -> datetime | None:
        """将无时区时间视为 UTC,带时区时间转换为 UTC."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)

    @staticmethod
    def to_iso(dt: datetime | None) -> str | None:
        """输出 ISO 8601 字符串,None 原样返回."""
        normalized = TimeUtils.ensure_utc(dt)
        return normalized.isoformat() if normalized else None


time_utils = TimeUtils()

__all__ = ["TimeUtils", "time_utils"]

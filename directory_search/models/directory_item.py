"""目录检索 - 目录统计行模型."""

from directory_search import db
from directory_search.utils.time_utils import time_utils


class DirectoryItem(db.Model):
    """按统计周期预计算的用户统计行.

    每个 (user_id, period_type) 一行,由上游定时任务刷新.
    """

    __tablename__ = "directory_items"
    __table_args__ = (db.Index("ix_directory_items_period_user", "period_type", "user_id"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    period_type = db.Column(db.Integer, nullable=False)
    likes_received = db.Column(db.Integer, nullable=False, default=0)
    likes_given = db.Column(db.Integer, nullable=False, default=0)
    topics_entered = db.Column(db.Integer, nullable=False, default=0)
    topic_count = db.Column(db.Integer, nullable=False, default=0)
    post_count = db.Column(db.Integer, nullable=False, default=0)
    posts_read = db.Column(db.Integer, nullable=False, default=0)
    days_visited = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)

    user = db.relationship("User", lazy="joined")

    def stats(self, columns: tuple[str, ...]) -> dict[str, int]:
        """读取指定统计列."""
        return {column: int(getattr(self, column) or 0) for column in columns}

    def __repr__(self) -> str:
        return f"<DirectoryItem user={self.user_id} period={self.period_type}>"

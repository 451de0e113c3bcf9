"""目录检索 - 用户模型."""

from flask_login import UserMixin

from directory_search import db
from directory_search.utils.time_utils import time_utils


class User(UserMixin, db.Model):
    """用户账户.

    Attributes:
        id: 用户 ID,主键.
        username: 用户名.
        username_lower: 小写用户名,用于大小写无关的精确匹配.
        name: 显示名,可为空.
        active: 是否已激活.
        staged: 是否为占位账户(导入/邮件创建但未注册).
        trust_level: 信任等级 0-4.
        suspended_till: 封禁截止时间,为空或早于当前时间表示未封禁.
        admin / moderator: 员工身份.
        created_at: 注册时间.
        last_seen_at: 最后活跃时间.

    """

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(60), nullable=False)
    username_lower = db.Column(db.String(60), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=False)
    staged = db.Column(db.Boolean, nullable=False, default=False)
    trust_level = db.Column(db.Integer, nullable=False, default=0)
    suspended_till = db.Column(db.DateTime(timezone=True), nullable=True)
    admin = db.Column(db.Boolean, nullable=False, default=False)
    moderator = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)
    last_seen_at = db.Column(db.DateTime(timezone=True), nullable=True)

    @property
    def is_active(self) -> bool:  # pyright: ignore[reportIncompatibleVariableOverride]
        return bool(self.active)

    @property
    def is_staff(self) -> bool:
        """管理员或版主."""
        return bool(self.admin or self.moderator)

    def __repr__(self) -> str:
        return f"<User {self.username}>"

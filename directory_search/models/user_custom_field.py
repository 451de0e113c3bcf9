"""目录检索 - 用户自定义字段取值."""

from directory_search import db
from directory_search.utils.time_utils import time_utils


class UserCustomField(db.Model):
    """用户自定义字段取值.

    同一 (user_id, name) 可能存在多行历史记录,读取时以 id 最大的一行为准.
    多选字段的最新一行可以只含单个选项,也可以是以逗号拼接的多个选项.
    """

    __tablename__ = "user_custom_fields"
    __table_args__ = (db.Index("ix_user_custom_fields_user_id_name", "user_id", "name"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(256), nullable=False)
    value = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)

    def __repr__(self) -> str:
        return f"<UserCustomField {self.user_id}:{self.name}>"

"""目录检索 - 自定义资料字段定义与可选值."""

from directory_search import db
from directory_search.utils.time_utils import time_utils


class UserField(db.Model):
    """自定义资料字段定义.

    取值以 `user_field_<id>` 为键存放在 user_custom_fields 中.
    """

    __tablename__ = "user_fields"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    field_type = db.Column(db.String(50), nullable=False, default="text")
    searchable = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)

    options = db.relationship(
        "UserFieldOption",
        backref="user_field",
        lazy="dynamic",
        order_by="UserFieldOption.id",
    )

    def __repr__(self) -> str:
        return f"<UserField {self.id}:{self.name}>"


class UserFieldOption(db.Model):
    """字段的可选值(下拉/多选),按 id 顺序展示."""

    __tablename__ = "user_field_options"

    id = db.Column(db.Integer, primary_key=True)
    user_field_id = db.Column(db.Integer, db.ForeignKey("user_fields.id"), nullable=False, index=True)
    value = db.Column(db.String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<UserFieldOption {self.user_field_id}:{self.value}>"

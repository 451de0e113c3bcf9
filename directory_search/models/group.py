"""目录检索 - 群组与成员关系模型."""

from directory_search import db
from directory_search.constants.directory import GroupVisibility


class Group(db.Model):
    """群组.

    Attributes:
        visibility_level: 群组本身的可见性.
        members_visibility_level: 成员列表的可见性.

    """

    __tablename__ = "groups"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    visibility_level = db.Column(db.Integer, nullable=False, default=GroupVisibility.PUBLIC)
    members_visibility_level = db.Column(db.Integer, nullable=False, default=GroupVisibility.PUBLIC)

    def __repr__(self) -> str:
        return f"<Group {self.name}>"


class GroupUser(db.Model):
    """群组成员关系."""

    __tablename__ = "group_users"
    __table_args__ = (db.UniqueConstraint("group_id", "user_id", name="uq_group_users_group_user"),)

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey("groups.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    owner = db.Column(db.Boolean, nullable=False, default=False)

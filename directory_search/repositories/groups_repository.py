"""群组 Repository."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import Select

from directory_search.models.group import Group, GroupUser


class GroupsRepository:
    """群组与成员关系查询."""

    @staticmethod
    def get_by_name(name: str | None) -> Group | None:
        normalized = (name or "").strip()
        if not normalized:
            return None
        return cast("Group | None", Group.query.filter_by(name=normalized).first())

    @staticmethod
    def get_membership(group_id: int, user_id: int) -> GroupUser | None:
        return cast(
            "GroupUser | None",
            GroupUser.query.filter_by(group_id=group_id, user_id=user_id).first(),
        )

    @staticmethod
    def member_ids_select(group_id: int) -> Select[Any]:
        """群组成员 user_id 子查询."""
        return select(GroupUser.user_id).where(cast(ColumnElement[int], GroupUser.group_id) == group_id)

    @staticmethod
    def members_of_named_groups_select(names: list[str]) -> Select[Any]:
        """属于任一指定名称群组的成员 user_id 子查询."""
        return (
            select(GroupUser.user_id)
            .join(Group, cast(ColumnElement[int], Group.id) == GroupUser.group_id)
            .where(cast(ColumnElement[str], Group.name).in_(names))
        )

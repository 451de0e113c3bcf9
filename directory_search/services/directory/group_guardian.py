"""群组可见性校验.

可见性级别:
- public: 所有人(含匿名)
- logged_on_users: 已登录用户
- members: 员工或群组成员
- staff: 员工或群组所有者
- owners: 群组所有者
管理员可见全部群组.群组本身与成员列表分别按各自级别校验.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from directory_search.constants.directory import GroupVisibility
from directory_search.core.exceptions import AuthorizationError, ValidationError
from directory_search.repositories.groups_repository import GroupsRepository

if TYPE_CHECKING:
    from directory_search.models.group import Group
    from directory_search.models.user import User


class GroupGuardian:
    """判断查看者能否看到群组及其成员列表."""

    def __init__(self, repository: GroupsRepository | None = None) -> None:
        self._repository = repository or GroupsRepository()

    def ensure_can_list_members(self, group_name: str, viewer: User | None) -> Group:
        """返回可查看成员的群组.

        Raises:
            ValidationError: 群组不存在.
            AuthorizationError: 群组或其成员列表对查看者不可见.

        """
        group = self._repository.get_by_name(group_name)
        if group is None:
            raise ValidationError(message_key="GROUP_NOT_FOUND", extra={"group": group_name})

        if not self._can_see(group, int(group.visibility_level), viewer):
            raise AuthorizationError(message_key="GROUP_NOT_VISIBLE", extra={"group": group_name})
        if not self._can_see(group, int(group.members_visibility_level), viewer):
            raise AuthorizationError(message_key="GROUP_NOT_VISIBLE", extra={"group": group_name})
        return group

    def _can_see(self, group: Group, level: int, viewer: User | None) -> bool:
        if level == GroupVisibility.PUBLIC:
            return True
        if viewer is None:
            return False
        if viewer.admin:
            return True
        if level == GroupVisibility.LOGGED_ON_USERS:
            return True

        membership = self._repository.get_membership(int(group.id), int(viewer.id))
        if level == GroupVisibility.MEMBERS:
            return viewer.is_staff or membership is not None
        if level == GroupVisibility.STAFF:
            return viewer.is_staff or bool(membership and membership.owner)
        return bool(membership and membership.owner)

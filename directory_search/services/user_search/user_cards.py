"""用户卡片 DTO 转换."""

from __future__ import annotations

from directory_search.core.types.user_search import UserCardItem
from directory_search.models.user import User
from directory_search.utils.time_utils import time_utils


def to_user_card(user: User) -> UserCardItem:
    return UserCardItem(
        id=int(user.id),
        username=str(user.username),
        name=user.name or None,
        trust_level=int(user.trust_level or 0),
        created_at=time_utils.to_iso(user.created_at),
        last_seen_at=time_utils.to_iso(user.last_seen_at),
    )

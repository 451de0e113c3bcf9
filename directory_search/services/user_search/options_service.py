"""筛选选项 Service."""

from __future__ import annotations

from directory_search.constants.user_search import FILTERABLE_ATTRIBUTES
from directory_search.core.exceptions import NotFoundError
from directory_search.core.types.user_search import UserSearchOptions
from directory_search.repositories.user_fields_repository import UserFieldsRepository
from directory_search.services.site_settings import SearchSiteSettings
from directory_search.services.user_search.field_resolver import UserFieldResolver


class UserSearchOptionsService:
    """返回各可筛选属性的可选值,未配置或未知字段返回空列表."""

    def __init__(
        self,
        repository: UserFieldsRepository | None = None,
        *,
        settings: SearchSiteSettings | None = None,
    ) -> None:
        self._repository = repository or UserFieldsRepository()
        self._settings = settings

    def get_options(self) -> UserSearchOptions:
        settings = self._settings or SearchSiteSettings.current()
        if not settings.user_search_enabled:
            raise NotFoundError(message_key="USER_SEARCH_DISABLED")

        resolver = UserFieldResolver(self._repository)
        options = UserSearchOptions()
        for attribute in FILTERABLE_ATTRIBUTES:
            field_id = resolver.resolve_id(settings.field_name_for(attribute))
            values = self._repository.list_option_values(field_id) if field_id is not None else []
            setattr(options, attribute, values)
        return options

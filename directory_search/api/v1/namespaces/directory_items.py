"""Directory items namespace."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from flask import request
from flask_login import current_user
from flask_restx import Namespace, fields

from directory_search.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from directory_search.api.v1.resources.base import BaseResource
from directory_search.api.v1.resources.query_parsers import add_string_args, new_parser
from directory_search.constants.system_constants import SuccessMessages
from directory_search.constants.user_search import DIRECTORY_FILTER_PARAMS
from directory_search.schemas.directory_items_query import DirectoryItemsQuery
from directory_search.schemas.validation import validate_or_raise
from directory_search.services.directory.directory_items_service import DirectoryItemsService
from directory_search.services.site_settings import SearchSiteSettings

if TYPE_CHECKING:
    from directory_search.models.user import User

ns = Namespace("directory_items", description="用户目录")

ErrorEnvelope = get_error_envelope_model(ns)

DirectoryUserModel = ns.model(
    "DirectoryUser",
    {
        "id": fields.Integer(required=True, description="用户 ID", example=1),
        "username": fields.String(required=True, description="用户名", example="alice"),
        "name": fields.String(required=False, description="显示名"),
        "trust_level": fields.Integer(required=True, description="信任等级", example=1),
        "created_at": fields.String(required=False, description="注册时间(ISO8601)"),
        "last_seen_at": fields.String(required=False, description="最后活跃时间(ISO8601)"),
    },
)

DirectoryItemModel = ns.model(
    "DirectoryItem",
    {
        "id": fields.Integer(required=True, description="目录行 ID", example=10),
        "user_id": fields.Integer(required=True, description="用户 ID", example=1),
        "user": fields.Nested(DirectoryUserModel),
        "likes_received": fields.Integer(required=False),
        "likes_given": fields.Integer(required=False),
        "topics_entered": fields.Integer(required=False),
        "topic_count": fields.Integer(required=False),
        "post_count": fields.Integer(required=False),
        "posts_read": fields.Integer(required=False),
        "days_visited": fields.Integer(required=False),
    },
)

DirectoryItemsData = ns.model(
    "DirectoryItemsData",
    {
        "directory_items": fields.List(fields.Nested(DirectoryItemModel)),
    },
)

DirectoryItemsMeta = ns.model(
    "DirectoryItemsMeta",
    {
        "last_updated_at": fields.String(required=False, description="统计更新时间(ISO8601)"),
        "total_rows_directory_items": fields.Integer(required=True, description="匹配行总数", example=120),
        "load_more_directory_items": fields.String(
            required=True,
            description="下一页链接",
            example="/api/v1/directory_items?period=weekly&order=last_seen&limit=50&page=1",
        ),
    },
)

DirectoryItemsSuccessEnvelope = make_success_envelope_model(
    ns,
    "DirectoryItemsSuccessEnvelope",
    DirectoryItemsData,
    DirectoryItemsMeta,
)

_directory_items_query_parser = new_parser()
add_string_args(
    _directory_items_query_parser,
    "period",
    "page",
    "limit",
    "order",
    "asc",
    "group",
    "exclude_usernames",
    "exclude_groups",
    "name",
    "username",
    *DIRECTORY_FILTER_PARAMS,
)


def _current_viewer() -> User | None:
    if not current_user.is_authenticated:
        return None
    return cast("User", current_user._get_current_object())  # noqa: SLF001


@ns.route("")
class DirectoryItemsResource(BaseResource):
    """用户目录列表资源(允许匿名访问)."""

    @ns.response(200, "OK", DirectoryItemsSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(403, "Forbidden", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    @ns.expect(_directory_items_query_parser)
    def get(self):
        """获取指定周期的用户目录."""
        query_snapshot = request.args.to_dict(flat=False)

        def _execute():
            settings = SearchSiteSettings.current()
            parsed = _directory_items_query_parser.parse_args()
            query = validate_or_raise(
                DirectoryItemsQuery,
                dict(parsed),
                message_key="INVALID_REQUEST",
                message_key_by_field={"period": "INVALID_PERIOD"},
                context={
                    "page_size": settings.directory_page_size,
                    "page_limit": settings.directory_page_limit,
                },
            )
            result = DirectoryItemsService(settings=settings).list_items(query.to_filters(), viewer=_current_viewer())
            return self.success(
                data={"directory_items": [item.to_dict() for item in result.items]},
                message=SuccessMessages.DIRECTORY_ITEMS_LISTED,
                meta={
                    "last_updated_at": result.last_updated_at,
                    "total_rows_directory_items": result.total,
                    "load_more_directory_items": result.load_more_url,
                },
            )

        return self.safe_call(
            _execute,
            module="directory",
            action="list_directory_items",
            public_error="获取用户目录失败",
            context={"query_params": query_snapshot},
        )

"""User search namespace."""

from __future__ import annotations

from dataclasses import asdict
from typing import ClassVar

from flask import request
from flask_restx import Namespace, fields

from directory_search.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from directory_search.api.v1.resources.base import BaseResource
from directory_search.api.v1.resources.decorators import api_login_required
from directory_search.api.v1.resources.query_parsers import add_string_args, new_parser
from directory_search.constants.system_constants import SuccessMessages
from directory_search.schemas.user_search_query import UserSearchQuery
from directory_search.schemas.validation import validate_or_raise
from directory_search.services.user_search.options_service import UserSearchOptionsService
from directory_search.services.user_search.user_search_service import UserSearchService

ns = Namespace("user-search", description="按自定义资料字段检索用户")

ErrorEnvelope = get_error_envelope_model(ns)

UserCardModel = ns.model(
    "UserCard",
    {
        "id": fields.Integer(required=True, description="用户 ID", example=1),
        "username": fields.String(required=True, description="用户名", example="alice"),
        "name": fields.String(required=False, description="显示名", example="Alice"),
        "trust_level": fields.Integer(required=True, description="信任等级", example=1),
        "created_at": fields.String(required=False, description="注册时间(ISO8601)", example="2025-01-01T00:00:00"),
        "last_seen_at": fields.String(required=False, description="最后活跃时间(ISO8601)"),
    },
)

UserSearchData = ns.model(
    "UserSearchData",
    {
        "users": fields.List(fields.Nested(UserCardModel)),
    },
)

UserSearchMeta = ns.model(
    "UserSearchMeta",
    {
        "page": fields.Integer(example=1),
        "per_page": fields.Integer(example=30),
        "total": fields.Integer(example=42),
    },
)

UserSearchSuccessEnvelope = make_success_envelope_model(
    ns,
    "UserSearchSuccessEnvelope",
    UserSearchData,
    UserSearchMeta,
)

UserSearchOptionsData = ns.model(
    "UserSearchOptionsData",
    {
        "gender": fields.List(fields.String, example=["Male", "Female"]),
        "country": fields.List(fields.String, example=["USA", "Canada"]),
        "listen": fields.List(fields.String, example=["Rock", "Jazz"]),
        "share": fields.List(fields.String, example=["Rock", "Jazz"]),
    },
)

UserSearchOptionsSuccessEnvelope = make_success_envelope_model(
    ns,
    "UserSearchOptionsSuccessEnvelope",
    UserSearchOptionsData,
)

_user_search_query_parser = new_parser()
add_string_args(_user_search_query_parser, "page", "per_page", "order", "asc", "gender", "country", "listen", "share")


@ns.route("")
class UserSearchResource(BaseResource):
    """高级检索资源."""

    method_decorators: ClassVar[list] = [api_login_required]

    @ns.response(200, "OK", UserSearchSuccessEnvelope)
    @ns.response(401, "Unauthorized", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    @ns.expect(_user_search_query_parser)
    def get(self):
        """按属性筛选检索用户."""
        query_snapshot = request.args.to_dict(flat=False)

        def _execute():
            parsed = _user_search_query_parser.parse_args()
            query = validate_or_raise(UserSearchQuery, dict(parsed), message_key="INVALID_REQUEST")
            filters = query.to_filters()
            result = UserSearchService().search(filters)
            return self.success(
                data={"users": [asdict(item) for item in result.items]},
                message=SuccessMessages.USER_SEARCH_LISTED,
                meta={"page": filters.page, "per_page": filters.per_page, "total": result.total},
            )

        return self.safe_call(
            _execute,
            module="user_search",
            action="search_users",
            public_error="用户检索失败",
            context={"query_params": query_snapshot},
        )


@ns.route("/options")
class UserSearchOptionsResource(BaseResource):
    """筛选选项资源."""

    method_decorators: ClassVar[list] = [api_login_required]

    @ns.response(200, "OK", UserSearchOptionsSuccessEnvelope)
    @ns.response(401, "Unauthorized", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self):
        """获取各属性的可选值."""

        def _execute():
            options = UserSearchOptionsService().get_options()
            return self.success(data=asdict(options), message=SuccessMessages.USER_SEARCH_OPTIONS_LISTED)

        return self.safe_call(
            _execute,
            module="user_search",
            action="list_search_options",
            public_error="获取筛选选项失败",
        )

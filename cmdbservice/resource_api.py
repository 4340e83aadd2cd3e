"""Web API routes for resources, model and resource relations, and LDAP users."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from flask import Blueprint, Flask, jsonify, request

from .common import WEB_API_GROUP
from .responses import error, error_with_data, request_err, result_handle, success
from .vo import (
    AddModelRelationVO,
    BindingError,
    ConfigModelAttributeVO,
    ModelMenuVO,
    ResourceListPageParamVO,
    ResourceRelationVO,
    UpdateModelRelationVO,
    bind,
    to_json_dict,
)

_USER_HEADER = "x-wrapper-username"
_DIGITS = re.compile(r"\d*", re.ASCII)


def _username() -> str:
    return request.headers.get(_USER_HEADER, "")


def _raw_text() -> str:
    return request.get_data().decode("utf-8", errors="replace")


def _loose_string_map() -> dict[str, str]:
    """The string-valued entries of a JSON object body; anything unreadable is skipped."""
    try:
        data = json.loads(request.get_data())
    except ValueError:
        return {}
    if not isinstance(data, Mapping):
        return {}
    return {key: value for key, value in data.items() if isinstance(value, str)}


def _field(item: Any, name: str) -> str:
    value = item.get(name) if isinstance(item, Mapping) else getattr(item, name, "")
    return value if isinstance(value, str) else ""


def _attempt(func, *args) -> tuple[Any, BaseException | None]:
    try:
        return func(*args), None
    except Exception as exc:  # service failures are reported to the client
        return None, exc


class ResourceApi:
    """Routes that list, edit and synchronise resource instances.

    An exception raised by ``add_resource`` or ``update_resource`` may carry a
    ``data`` attribute, which is sent back alongside the error message.
    """

    def __init__(self, resource_service, sync_service, model_service):
        self._resources = resource_service
        self._sync = sync_service
        self._models = model_service

    def register(self, app: Flask) -> None:
        """Add every route of this API to ``app``."""
        bp = Blueprint("resource_api", __name__, url_prefix=WEB_API_GROUP)
        bp.add_url_rule("/model-menu", "model_menu", self._get_model_menu, methods=["GET"])
        bp.add_url_rule("/model-attribute/<uid>", "model_attribute",
                        self._get_model_attribute, methods=["GET"])
        bp.add_url_rule("/model-attribute/<uid>", "config_model_attribute",
                        self._config_model_attribute, methods=["PUT"])
        bp.add_url_rule("/model-info/<uid>", "model_info", self._get_model_info, methods=["GET"])
        bp.add_url_rule("/resource-list", "resource_list", self._get_resource_list_page,
                        methods=["POST"])
        bp.add_url_rule("/resource/<uuid>", "resource_detail", self._get_resource_detail,
                        methods=["GET"])
        bp.add_url_rule("/resource", "add_resource", self._add_resource, methods=["POST"])
        bp.add_url_rule("/resource", "update_resource", self._update_resource, methods=["PUT"])
        bp.add_url_rule("/resource", "delete_resource", self._delete_resource,
                        methods=["DELETE"])
        bp.add_url_rule("/resource-attribute/<uuid>", "resource_attribute",
                        self._update_resource_attribute, methods=["PUT"])
        bp.add_url_rule("/resource-sync/<model_uid>", "resource_sync", self._resource_sync,
                        methods=["GET"])
        bp.add_url_rule("/sync-button/<model_uid>", "sync_button", self._sync_button,
                        methods=["GET"])
        app.register_blueprint(bp)

    def _sync_button(self, model_uid: str):
        return jsonify(success(self._sync.sync_button(model_uid, _username())))

    def _resource_sync(self, model_uid: str):
        _, exc = _attempt(self._sync.sync_resource, model_uid, _username())
        if exc is not None:
            return jsonify(error(str(exc)))
        return jsonify(success(""))

    def _get_model_attribute(self, uid: str):
        return jsonify(success(self._resources.get_model_attribute_list(uid)))

    def _config_model_attribute(self, uid: str):
        try:
            vo = bind(ConfigModelAttributeVO, request.get_data())
        except BindingError:
            vo = ConfigModelAttributeVO()
        self._resources.set_model_attribute(vo.uid, vo.columns)
        return jsonify(success(None))

    def _get_model_menu(self):
        models, exc = _attempt(self._models.get_simple_model_list)
        if exc is not None or models is None:
            return jsonify(success(None))
        menu = [to_json_dict(ModelMenuVO(uid=_field(m, "uid"), name=_field(m, "name")))
                for m in models]
        return jsonify(success(menu))

    def _add_resource(self):
        return self._save(self._resources.add_resource)

    def _update_resource(self):
        return self._save(self._resources.update_resource)

    @staticmethod
    def _save(func):
        try:
            result = func(_raw_text(), _username())
        except Exception as exc:  # the failure may still carry data for the client
            return jsonify(error_with_data(getattr(exc, "data", None), str(exc)))
        return jsonify(success(result))

    def _get_resource_list_page(self):
        try:
            vo = bind(ResourceListPageParamVO, request.get_data())
        except BindingError as exc:
            return jsonify(error(str(exc)))
        if vo.query_value:
            return jsonify(success(self._resources.get_resource_list_page_by_query_value(
                vo.model_uid, vo.query_value, vo.current, vo.page_size)))
        if vo.query_map is None:
            vo.query_map = {}
        if "ID" in vo.query_map and not _DIGITS.fullmatch(vo.query_map["ID"].strip()):
            return jsonify(error("ID内容必须是整数"))
        return jsonify(success(self._resources.get_resource_list_page(vo)))

    def _get_resource_detail(self, uuid: str):
        result, exc = _attempt(self._resources.get_resource_detail, uuid)
        if exc is not None:
            return jsonify(error(str(exc)))
        return jsonify(success(result))

    def _delete_resource(self):
        uuids = _loose_string_map().get("uuids", "").split(",")
        _, exc = _attempt(self._resources.delete_resource, uuids)
        if exc is not None:
            return jsonify(error(str(exc)))
        return jsonify(success("删除成功"))

    def _update_resource_attribute(self, uuid: str):
        value = _loose_string_map().get("attributeInsValue", "")
        _, exc = _attempt(self._resources.update_resource_attribute, uuid, value, _username())
        if exc is not None:
            return jsonify(error(str(exc)))
        return jsonify(success("更新成功"))

    def _get_model_info(self, uid: str):
        return jsonify(result_handle(*_attempt(self._resources.get_model_info_for_ins, uid)))


class RelationshipApi:
    """Routes for relations between models and between resource instances."""

    def __init__(self, relation_service):
        self._relations = relation_service

    def register(self, app: Flask) -> None:
        """Add every route of this API to ``app``."""
        bp = Blueprint("relationship_api", __name__, url_prefix=WEB_API_GROUP)
        bp.add_url_rule("/model-relation-list", "model_relation_list",
                        self._get_model_relation_list, methods=["POST"])
        bp.add_url_rule("/model-relation-usage", "model_relation_usage",
                        self._get_model_relation_usage_count, methods=["POST"])
        bp.add_url_rule("/add-model-relation", "add_model_relation",
                        self._add_model_relation, methods=["POST"])
        bp.add_url_rule("/delete-model-relation", "delete_model_relation",
                        self._delete_model_relation, methods=["POST"])
        bp.add_url_rule("/update-model-relation", "update_model_relation",
                        self._update_model_relation, methods=["POST"])
        bp.add_url_rule("/resource-relation/<uuid>", "resource_relation_list",
                        self._get_resource_relation_list, methods=["GET"])
        bp.add_url_rule("/resource-relation", "add_resource_relation",
                        self._add_resource_relation, methods=["POST"])
        bp.add_url_rule("/resource-relation", "delete_resource_relation",
                        self._delete_resource_relation, methods=["DELETE"])
        app.register_blueprint(bp)

    def _add_model_relation(self):
        try:
            vo = bind(AddModelRelationVO, request.get_data())
        except BindingError as exc:
            return jsonify(request_err(exc))
        return jsonify(result_handle(*_attempt(self._relations.add_model_relation, vo,
                                               _username())))

    def _delete_model_relation(self):
        uid = _loose_string_map().get("uid", "")
        return jsonify(result_handle(*_attempt(self._relations.delete_model_relation, uid)))

    def _get_model_relation_list(self):
        uid = _loose_string_map().get("uid", "")
        return jsonify(success(self._relations.get_model_relation_list(uid)))

    def _update_model_relation(self):
        try:
            vo = bind(UpdateModelRelationVO, request.get_data())
        except BindingError as exc:
            return jsonify(request_err(exc))
        return jsonify(result_handle(*_attempt(self._relations.update_model_relation, vo,
                                               _username())))

    def _get_model_relation_usage_count(self):
        uid = request.args.get("uid", "")
        relations, exc = _attempt(self._relations.get_resource_relations_by_model_relation_uid,
                                  uid)
        return jsonify(result_handle(len(relations or ()), exc))

    def _get_resource_relation_list(self, uuid: str):
        return jsonify(result_handle(*_attempt(self._relations.get_resource_relation_list,
                                               uuid)))

    def _add_resource_relation(self):
        return self._resource_relation(self._relations.add_resource_relation)

    def _delete_resource_relation(self):
        return self._resource_relation(self._relations.delete_resource_relation)

    @staticmethod
    def _resource_relation(func):
        try:
            vo = bind(ResourceRelationVO, request.get_data())
        except BindingError as exc:
            return jsonify(result_handle(None, exc))
        return jsonify(result_handle(*_attempt(func, vo.source_uuid, vo.target_uuid, vo.uid)))


class LdapApi:
    """Route that lists the users known to the directory."""

    def __init__(self, ldap_service):
        self._ldap = ldap_service

    def register(self, app: Flask) -> None:
        """Add the route of this API to ``app``."""
        bp = Blueprint("ldap_api", __name__, url_prefix=WEB_API_GROUP)
        bp.add_url_rule("/ldap/user-list", "ldap_user_list", self._get_ldap_user_list,
                        methods=["GET"])
        app.register_blueprint(bp)

    def _get_ldap_user_list(self):
        users, exc = _attempt(self._ldap.get_ldap_user_list)
        if exc is not None:
            return jsonify(error(str(exc)))
        return jsonify(success(users))
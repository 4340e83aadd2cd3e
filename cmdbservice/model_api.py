"""Web API routes for model groups, models, attribute groups, attributes and relationships."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any

from flask import Blueprint, Flask, jsonify, request

from .common import WEB_API_GROUP
from .responses import error_with_data, request_err, request_ok
from .vo import (
    AddAttributeGroupVO,
    AddModelGroupVO,
    AddModelVO,
    BindingError,
    CreateAttributeVO,
    CreateRelationshipModelVO,
    IdVO,
    UpdateAttributeGroupVO,
    UpdateAttributeVO,
    UpdateModelVO,
    UpdateRelationshipModelVO,
    bind,
)

_USER_HEADER = "x-wrapper-username"
_BAD_PARAMETERS = "参数异常"


def _username() -> str:
    return request.headers.get(_USER_HEADER, "")


def _reply(body: dict):
    return jsonify(body)


def _json_object() -> dict:
    """Decode the request body as a JSON object; ``null`` counts as an empty one."""
    try:
        data = json.loads(request.get_data())
    except ValueError as exc:
        raise BindingError(str(exc)) from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise BindingError(f"cannot unmarshal {type(data).__name__} into an object")
    return dict(data)


def _string_map() -> dict[str, str]:
    """Decode the request body as a JSON object whose values are all strings."""
    result = {}
    for key, value in _json_object().items():
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise BindingError(f"cannot unmarshal {type(value).__name__} into a string value")
        result[key] = value
    return result


def _format_float(number: float) -> str:
    digits_tuple = Decimal(repr(float(number))).normalize().as_tuple()
    sign = "-" if digits_tuple.sign else ""
    digits = "".join(str(d) for d in digits_tuple.digits)
    if digits.strip("0") == "":
        return sign + "0"
    exponent = len(digits) + digits_tuple.exponent - 1
    if exponent < -4 or exponent >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if exponent < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(exponent):02d}"
    return sign + format(Decimal(repr(abs(float(number)))).normalize(), "f")


def _plain_text(value: Any) -> str:
    """Render a decoded JSON value the way a default text formatter shows it."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "[" + " ".join(_plain_text(item) for item in value) + "]"
    if isinstance(value, Mapping):
        pairs = (f"{key}:{_plain_text(value[key])}" for key in sorted(value))
        return "map[" + " ".join(pairs) + "]"
    return str(value)


def _page_number(text: str) -> int | None:
    """Parse a decimal integer with an optional sign, or return None."""
    body = text[1:] if text[:1] in "+-" else text
    if not body or not body.isascii() or not body.isdigit():
        return None
    return int(text)


class ModelApi:
    """Routes that manage the model catalogue.

    Services are called with plain arguments and report failures by raising.
    An exception raised by ``update_attribute`` may carry a ``data`` attribute,
    which is sent back alongside the error message.
    """

    def __init__(self, model_service, attribute_service):
        self._models = model_service
        self._attributes = attribute_service

    def register(self, app: Flask) -> None:
        """Add every route of this API to ``app``."""
        blueprint = Blueprint("model_api", __name__, url_prefix=WEB_API_GROUP)
        routes: list[tuple[str, Callable]] = [
            ("/model/model-group-list", self._get_all_group),
            ("/model/model-group-detail", self._get_group),
            ("/model/model-group-add", self._create_group),
            ("/model/model-group-update", self._put_group),
            ("/model/model-group-delete", self._delete_group),
            ("/model/model-list", self._get_all_model),
            ("/model/model-detail", self._get_model),
            ("/model/model-add", self._create_model),
            ("/model/model-update", self._put_model),
            ("/model/model-delete", self._delete_model),
            ("/model/attribute-group-list", self._get_all_attribute_group),
            ("/model/attribute-group-detail", self._get_attribute_group),
            ("/model/attribute-group-add", self._create_attribute_group),
            ("/model/attribute-group-update", self._put_attribute_group),
            ("/model/attribute-group-delete", self._delete_attribute_group),
            ("/model/attribute-list", self._get_all_attribute),
            ("/model/attribute-detail", self._get_attribute),
            ("/model/attribute-add", self._create_attribute),
            ("/model/attribute-update", self._put_attribute),
            ("/model/attribute-delete", self._delete_attribute),
            ("/model/relationship-list", self._get_all_relationship),
            ("/model/relationship-add", self._create_relationship),
            ("/model/relationship-update", self._update_relationship),
            ("/model/relationship-delete", self._delete_relationship),
        ]
        for path, handler in routes:
            endpoint = path.rsplit("/", 1)[-1].replace("-", "_")
            blueprint.add_url_rule(path, endpoint, handler, methods=["POST"])
        app.register_blueprint(blueprint)

    @staticmethod
    def _call(func: Callable, *args, data_on_success: Any = ..., ) -> Any:
        try:
            result = func(*args)
        except Exception as exc:  # service failures become error bodies
            return _reply(request_err(exc))
        return _reply(request_ok(result if data_on_success is ... else data_on_success))

    # model groups

    def _get_all_group(self):
        try:
            groups = self._models.get_all_model_group()
        except Exception:  # the listing ignores service failures
            groups = None
        return _reply(request_ok(groups))

    def _get_group(self):
        try:
            params = _string_map()
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._models.get_model_group, params.get("uuid", ""))

    def _create_group(self):
        try:
            vo = bind(AddModelGroupVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        vo.uid = vo.uid.strip()
        vo.name = vo.name.strip()
        return self._call(self._models.create_model_group, vo, _username())

    def _put_group(self):
        try:
            vo = bind(AddModelGroupVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        vo.name = vo.name.strip()
        return self._call(self._models.update_model_group, vo, _username())

    def _delete_group(self):
        uuid = self._id_uuid()
        if not uuid:
            return _reply(request_err(_BAD_PARAMETERS))
        return self._call(self._models.delete_model_group, uuid, data_on_success="")

    # models

    def _get_all_model(self):
        return self._call(self._models.get_simple_model_list)

    def _get_model(self):
        try:
            params = _string_map()
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._models.get_model, params.get("uuid", ""))

    def _create_model(self):
        try:
            vo = bind(AddModelVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        vo.uid = vo.uid.strip()
        vo.name = vo.name.strip()
        return self._call(self._models.create_model, vo, _username())

    def _put_model(self):
        try:
            vo = bind(UpdateModelVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._models.update_model, vo, _username(), data_on_success="")

    def _delete_model(self):
        uuid = self._id_uuid()
        if not uuid:
            return _reply(request_err(_BAD_PARAMETERS))
        return self._call(self._models.delete_model, uuid, _username(), data_on_success="")

    # attribute groups

    def _get_all_attribute_group(self):
        limit = request.args.get("page_size", "10")
        page_number = request.args.get("page_number", "1")
        return self._call(self._attributes.get_attribute_group_list, limit, page_number)

    def _get_attribute_group(self):
        try:
            uuid = _plain_text(_json_object().get("uuid"))
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._attributes.get_attribute_group, uuid)

    def _create_attribute_group(self):
        try:
            vo = bind(AddAttributeGroupVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._attributes.create_attribute_group, vo, _username())

    def _put_attribute_group(self):
        try:
            vo = bind(UpdateAttributeGroupVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._attributes.update_attribute_group, vo, _username())

    def _delete_attribute_group(self):
        uuid = self._id_uuid()
        if not uuid:
            return _reply(request_err(_BAD_PARAMETERS))
        return self._call(self._attributes.delete_attribute_group, uuid, data_on_success="")

    # attributes

    def _get_all_attribute(self):
        limit = request.args.get("page_size", "10")
        page_number = request.args.get("page_number", "1")
        return self._call(self._attributes.get_attribute_list, limit, page_number)

    def _get_attribute(self):
        try:
            uuid = _plain_text(_json_object().get("uuid"))
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._attributes.get_attribute, uuid)

    def _create_attribute(self):
        try:
            vo = bind(CreateAttributeVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._attributes.create_attribute, vo, _username())

    def _put_attribute(self):
        try:
            vo = bind(UpdateAttributeVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        try:
            result = self._attributes.update_attribute(vo, _username())
        except Exception as exc:  # the failure may still carry data for the client
            return _reply(error_with_data(getattr(exc, "data", None), str(exc)))
        return _reply(request_ok(result))

    def _delete_attribute(self):
        try:
            uuid = _plain_text(_json_object().get("uuid"))
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._attributes.delete_attribute_instance, uuid, data_on_success="")

    # relationships

    def _get_all_relationship(self):
        limit = _page_number(request.args.get("pageSize", "10000"))
        if limit is None or limit < 0:
            return _reply(request_err("page_size参数不能小于0"))
        page_number = _page_number(request.args.get("current", "1"))
        if page_number is None or page_number < 0:
            return _reply(request_err("page_number"))
        try:
            result = self._models.get_relationship_list(limit, page_number)
        except Exception:  # an empty list is shown instead of the failure
            return _reply(request_ok([]))
        return _reply(request_ok(result))

    def _create_relationship(self):
        try:
            vo = bind(CreateRelationshipModelVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._models.save_relationship, vo, _username())

    def _update_relationship(self):
        try:
            vo = bind(UpdateRelationshipModelVO, request.get_data())
        except BindingError as exc:
            return _reply(request_err(exc))
        return self._call(self._models.update_relationship, vo, _username(),
                          data_on_success=None)

    def _delete_relationship(self):
        uuid = self._id_uuid()
        if not uuid:
            return _reply(request_err("uuid参数不能为空"))
        return self._call(self._models.delete_relationship, uuid, data_on_success="")

    @staticmethod
    def _id_uuid() -> str:
        """The uuid of an IdVO body, or an empty string when the body does not bind."""
        try:
            return bind(IdVO, request.get_data()).uuid
        except BindingError:
            return ""
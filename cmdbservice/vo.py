"""Value objects exchanged with web clients, with JSON binding and validation."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any


class BindingError(ValueError):
    """Raised when request data does not fit a value object."""


def _spec(json_name: str | None, kind: str, *, default: Any = None, required: bool = False,
          gte: int | None = None, lte: int | None = None, item: type | None = None):
    metadata = {"json": json_name, "kind": kind, "required": required,
                "gte": gte, "lte": lte, "item": item}
    return field(default=default, metadata=metadata)


def _str(json_name: str | None = None, **rules):
    return _spec(json_name, "str", default="", **rules)


def _int(json_name: str, **rules):
    return _spec(json_name, "int", default=0, **rules)


def _bool(json_name: str):
    return _spec(json_name, "bool", default=False)


def _any(json_name: str):
    return _spec(json_name, "any")


def _str_map(json_name: str):
    return _spec(json_name, "str_map")


def _tags(json_name: str):
    return _spec(json_name, "tags")


def _vo_list(json_name: str, item: type):
    return _spec(json_name, "vo_list", item=item)


def _map_list(json_name: str):
    return _spec(json_name, "map_list")


def _json_name(spec) -> str:
    """The JSON key of a field: its declared JSON name, else the field's own name."""
    return spec.metadata.get("json") or spec.name


@dataclass
class ApiResponseVO:
    data: Any = _any("data")
    code: int = _int("code")
    msg: str = _str("msg")


@dataclass
class PageResultVO:
    total_count: int = _int("totalCount")
    items: Any = _any("list")


@dataclass
class ModelAttributeVisibleVO:
    uid: str = _str("uid")
    name: str = _str("name")
    visible: bool = _bool("visible")


@dataclass
class ModelMenuVO:
    uid: str = _str("uid")
    name: str = _str("name")


@dataclass
class ResourceListPageVO:
    id: int = _int("id")
    uuid: str = _str("uuid")
    model_uid: str = _str("modelUid")
    model_name: str = _str("modelName")
    attributes: dict | None = _str_map("attributes")


@dataclass
class ConfigModelAttributeVO:
    uid: str = _str("uid")
    columns: list | None = _vo_list("columns", ModelAttributeVisibleVO)


@dataclass
class ResourceRelationListPageVO:
    relationship_uid: str = _str("relationshipUid")
    relationship_name: str = _str("relationshipName")
    source_uid: str = _str("sourceUid")
    source_name: str = _str("sourceName")
    target_uid: str = _str("targetUid")
    target_name: str = _str("targetName")
    model_attributes: list | None = _vo_list("modelAttributes", ModelAttributeVisibleVO)
    resources: list | None = _map_list("resources")


@dataclass
class ResourceListPageParamVO:
    page_size: int = _int("pageSize", required=True, gte=0)
    current: int = _int("current", required=True, gte=0)
    model_uid: str = _str("modelUid", required=True)
    query_tags: dict | None = _tags("queryTags")
    query_value: str = _str("queryValue")
    query_map: dict | None = _str_map("queryMap")
    uuid: str = _str("uuid")
    has_relation: int = _int("hasRelation")
    model_relation_uid: str = _str("modelRelationUid")


@dataclass
class AddModelGroupVO:
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)


@dataclass
class AddModelVO:
    model_group_uuid: str = _str("modelGroupUUID", required=True)
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)


@dataclass
class UpdateModelVO:
    model_group_uuid: str = _str("modelGroupUUID")
    uuid: str = _str("uuid", required=True)
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)


@dataclass
class AddAttributeGroupVO:
    model_uuid: str = _str("modelUUID", required=True)
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)


@dataclass
class UpdateAttributeGroupVO:
    uuid: str = _str("uuid", required=True)
    model_uuid: str = _str("modelUUID", required=True)
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)


@dataclass
class CreateRelationshipModelVO:
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)
    source2target: str = _str("source2Target", required=True, gte=1, lte=15)
    target2source: str = _str("target2Source", required=True, gte=1, lte=15)
    direction: str = _str("direction", required=True)


@dataclass
class UpdateRelationshipModelVO:
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)
    source2target: str = _str("source2Target", required=True, gte=1, lte=15)
    target2source: str = _str("target2Source", required=True, gte=1, lte=15)
    direction: str = _str("direction", required=True)


@dataclass
class ModelRelationVO:
    id: int = _int("id")
    uuid: str = _str("uuid")
    uid: str = _str("uid")
    relationship_uid: str = _str("relationshipUid")
    relationship_name: str = _str("relationshipName")
    constraint: str = _str("constraint")
    source_uid: str = _str("sourceUid")
    source_name: str = _str("sourceName")
    target_uid: str = _str("targetUid")
    target_name: str = _str("targetName")
    comment: Any = _any("comment")


@dataclass
class AddModelRelationVO:
    source_uid: str = _str("sourceUid", required=True)
    target_uid: str = _str("targetUid", required=True)
    relationship_uid: str = _str("relationshipUid", required=True)
    constraint: str = _str("constraint", required=True)
    comment: Any = _any("comment")


@dataclass
class UpdateModelRelationVO:
    uid: str = _str("uid", required=True)
    source_uid: str = _str("sourceUid", required=True)
    target_uid: str = _str("targetUid", required=True)
    relationship_uid: str = _str("relationshipUid", required=True)
    constraint: str = _str("constraint", required=True)
    comment: Any = _any("comment")


@dataclass
class IdVO:
    uid: str = _str("uid")
    uuid: str = _str("uuid")


@dataclass
class ResourceRelationVO:
    source_uuid: str = _str("sourceUUID", required=True)
    target_uuid: str = _str("targetUUID", required=True)
    uid: str = _str("uid", required=True)


@dataclass
class CreateAttributeVO:
    model_uid: str = _str("modelUId", required=True)
    attribute_group_uuid: str = _str("attributeGroupUUID", required=True)
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)
    value_type: str = _str("valueType", required=True)
    editable: bool = _bool("editable")
    required: bool = _bool("required")
    unique: bool = _bool("unique")
    regular: str = _str("regular")
    comment: str = _str("comment")
    default_value: Any = _any("defaultValue")
    unit: str = _str("unit")
    maximum: str = _str("maximum")
    minimum: str = _str("minimum")
    enums: Any = _any("enums")
    list_values: Any = _any("listValues")
    tips: str = _str("tips")


@dataclass
class UpdateAttributeVO:
    uuid: str = _str("uuid", required=True)
    model_uid: str = _str("modelUId", required=True)
    uid: str = _str("uid", required=True)
    name: str = _str("name", required=True)
    value_type: str = _str("valueType", required=True)
    editable: bool = _bool("editable")
    required: bool = _bool("required")
    unique: bool = _bool("unique")
    regular: str = _str("regular")
    comment: str = _str("comment")
    default_value: Any = _any("defaultValue")
    unit: str = _str("unit")
    maximum: str = _str("maximum")
    minimum: str = _str("minimum")
    enums: Any = _any("enums")
    list_values: Any = _any("listValues")
    tips: str = _str("tips")


@dataclass
class LdapUserVO:
    uid: str = _str("uid")
    name: str = _str("name")


@dataclass
class AliyunAccountVO:
    uuid: str = _str("uuid")
    account: str = _str("account")
    access_keyid: str = _str()
    access_secret: str = _str()
    area: str = _str("area")


def _json_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return "null" if value is None else type(value).__name__


def _lookup(data: Mapping, name: str) -> Any:
    if name in data:
        return data[name]
    folded = name.lower()
    return next((v for k, v in data.items() if isinstance(k, str) and k.lower() == folded), None)


def _is_str_map(value: Any) -> bool:
    return isinstance(value, Mapping) and all(isinstance(v, str) for v in value.values())


def _decode(cls: type, spec, value: Any) -> Any:
    meta = spec.metadata
    kind = meta["kind"]
    ok = {
        "str": lambda v: isinstance(v, str),
        "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
        "bool": lambda v: isinstance(v, bool),
        "any": lambda v: True,
        "str_map": _is_str_map,
        "tags": lambda v: isinstance(v, Mapping) and all(
            t is None or (isinstance(t, list) and all(isinstance(s, str) for s in t))
            for t in v.values()
        ),
        "vo_list": lambda v: isinstance(v, list),
        "map_list": lambda v: isinstance(v, list) and all(_is_str_map(m) for m in v),
    }[kind]
    if not ok(value):
        raise BindingError(
            f"cannot unmarshal {_json_kind(value)} into field {cls.__name__}.{_json_name(spec)} "
            f"of type {kind}"
        )
    if kind == "vo_list":
        return [bind(meta["item"], item) for item in value]
    if kind == "str_map":
        return dict(value)
    if kind == "tags":
        return {k: list(v) if v is not None else None for k, v in value.items()}
    if kind == "map_list":
        return [dict(m) for m in value]
    return value


def _check(cls: type, spec, value: Any) -> str | None:
    meta = spec.metadata
    name = _json_name(spec)

    def failure(tag: str) -> str:
        return (f"Key: '{cls.__name__}.{name}' Error:Field validation for '{name}' "
                f"failed on the '{tag}' tag")

    if meta["required"] and not value:
        return failure("required")
    measure = len(value) if isinstance(value, str) else value
    if meta["gte"] is not None and measure < meta["gte"]:
        return failure("gte")
    if meta["lte"] is not None and measure > meta["lte"]:
        return failure("lte")
    return None


def bind(cls, data):
    """Build a value object of ``cls`` from a JSON object, a JSON text or JSON bytes.

    Keys are matched by their JSON names, exactly first and then ignoring case.
    Missing or null keys keep their zero values. Raises BindingError when the data
    is not an object, a value has the wrong type, or a validation rule fails.
    """
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise BindingError(str(exc)) from exc
    if not isinstance(data, Mapping):
        raise BindingError(f"cannot unmarshal {_json_kind(data)} into {cls.__name__}")
    values = {}
    for spec in fields(cls):
        raw = _lookup(data, _json_name(spec))
        if raw is not None:
            values[spec.name] = _decode(cls, spec, raw)
    instance = cls(**values)
    problems = [p for spec in fields(cls) if (p := _check(cls, spec, getattr(instance, spec.name)))]
    if problems:
        raise BindingError("\n".join(problems))
    return instance


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_json_dict(value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    return value


def to_json_dict(vo) -> dict:
    """Return a value object as a JSON-ready dict keyed by its JSON names."""
    return {_json_name(spec): _plain(getattr(vo, spec.name)) for spec in fields(vo)}
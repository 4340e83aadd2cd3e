"""JSON response bodies of the web API; all are sent with HTTP status 200."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import is_dataclass
from typing import Any

from .vo import to_json_dict


def _encode(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        to_dict = getattr(data, "to_dict", None)
        return to_dict() if callable(to_dict) else to_json_dict(data)
    if isinstance(data, (list, tuple)):
        return [_encode(item) for item in data]
    if isinstance(data, Mapping):
        return {key: _encode(item) for key, item in data.items()}
    return data


def request_ok(data: Any) -> dict:
    """A success body for the v1 API."""
    return {"data": _encode(data), "msg": "", "code": 200}


def request_err(err: BaseException | str) -> dict:
    """A failure body carrying the error message."""
    return {"data": None, "msg": str(err), "code": 400}


def request_data_err(data: Any, code: int) -> dict:
    """A failure body carrying data and a caller-chosen code."""
    return {"data": _encode(data), "msg": "", "code": code}


def success(data: Any) -> dict:
    """A success body for the web API."""
    return {"data": _encode(data), "code": 200, "msg": ""}


def error(msg: str) -> dict:
    """A failure body for the web API."""
    return {"data": None, "code": 400, "msg": msg}


def error_with_data(data: Any, msg: str) -> dict:
    """A failure body that still carries data."""
    return {"data": _encode(data), "code": 400, "msg": msg}


def result_handle(result: Any, err: BaseException | None) -> dict:
    """A success body for ``result``, or a failure body when ``err`` is set."""
    if err is not None:
        return error(str(err))
    return success(result)
import json

from cmdbservice.apptree import Business
from cmdbservice.responses import (
    error,
    error_with_data,
    request_data_err,
    request_err,
    request_ok,
    result_handle,
    success,
)
from cmdbservice.vo import IdVO


def test_request_ok_shape():
    assert request_ok(["a"]) == {"data": ["a"], "msg": "", "code": 200}


def test_request_err_uses_message():
    body = request_err(ValueError("参数异常"))
    assert body == {"data": None, "msg": "参数异常", "code": 400}


def test_request_data_err_keeps_code():
    body = request_data_err("payload", 500)
    assert body["data"] == "payload"
    assert body["code"] == 500
    assert body["msg"] == ""


def test_success_and_error():
    assert success({"k": "v"}) == {"data": {"k": "v"}, "code": 200, "msg": ""}
    assert error("ID内容必须是整数") == {"data": None, "code": 400, "msg": "ID内容必须是整数"}


def test_error_with_data():
    body = error_with_data({"uuid": "u1"}, "failed")
    assert body == {"data": {"uuid": "u1"}, "code": 400, "msg": "failed"}


def test_result_handle_branches():
    assert result_handle(3, None) == success(3)
    assert result_handle(3, RuntimeError("boom")) == error("boom")


def test_value_objects_are_encoded():
    body = success([IdVO(uid="host", uuid="u1")])
    assert body["data"] == [{"uid": "host", "uuid": "u1"}]
    assert json.loads(json.dumps(body)) == body


def test_tree_objects_are_encoded():
    business = Business(id=1, name="shop")
    body = request_ok(business)
    assert body["data"] == business.to_dict()
    assert json.loads(json.dumps(body))["data"]["name"] == "shop"
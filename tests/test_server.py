import json
import threading
import time
import urllib.request

import pytest
from flask import Flask

from cmdbservice.apptree import Business, Domain
from cmdbservice.server import BaseServer, create_api_app, create_web_app


class FakeService:
    def __init__(self, **behaviour):
        self.behaviour = behaviour

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def method(*args):
            outcome = self.behaviour.get(name)
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome

        return method


def make_tree():
    business = Business(id=1)
    business.add_attribute("business_name", "shop")
    business.add_domain(Domain(id=2, name="orders"))
    return [business]


def test_app_tree_serialises_business():
    app = create_api_app(FakeService(get_app_tree=make_tree()))
    body = app.test_client().get("/cmdb/api/v1/app-tree").get_json()
    assert body["code"] == 200
    assert body["data"][0]["name"] == "shop"
    assert body["data"][0]["children"][0]["name"] == "orders"


def test_app_tree_failure_gives_null():
    app = create_api_app(FakeService(get_app_tree=RuntimeError("db down")))
    body = app.test_client().get("/cmdb/api/v1/app-tree").get_json()
    assert body == {"data": None, "msg": "", "code": 200}


def test_web_app_has_all_route_families():
    services = [FakeService() for _ in range(6)]
    app = create_web_app(*services)
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    for path in ("/cmdb/web/model/model-list", "/cmdb/web/resource-list",
                 "/cmdb/web/resource-relation/<uuid>", "/cmdb/web/ldap/user-list"):
        assert path in rules


def test_web_app_routes_reach_services():
    ldap = FakeService(get_ldap_user_list=[{"uid": "alice"}])
    app = create_web_app(FakeService(), FakeService(), FakeService(), FakeService(),
                         FakeService(), ldap)
    body = app.test_client().get("/cmdb/web/ldap/user-list").get_json()
    assert body["data"] == [{"uid": "alice"}]


def test_address_is_parsed():
    server = BaseServer("0.0.0.0:8081")
    assert (server.host, server.port) == ("0.0.0.0", 8081)
    assert isinstance(server.app, Flask)


@pytest.mark.parametrize("addr", ["localhost", "localhost:http", "localhost:70000"])
def test_bad_address_rejected(addr):
    with pytest.raises(ValueError):
        BaseServer(addr)


def test_stop_without_run_fails():
    with pytest.raises(RuntimeError):
        BaseServer("127.0.0.1:0").stop()


def test_run_serves_until_stopped():
    app = create_api_app(FakeService(get_app_tree=make_tree()))
    server = BaseServer("127.0.0.1:0", app)
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    deadline = time.monotonic() + 5
    while server.port == 0 and time.monotonic() < deadline:
        time.sleep(0.01)
    url = f"http://127.0.0.1:{server.port}/cmdb/api/v1/app-tree"
    with urllib.request.urlopen(url, timeout=5) as response:
        body = json.loads(response.read())
    server.stop()
    thread.join(timeout=5)
    assert body["data"][0]["name"] == "shop"
    assert not thread.is_alive()
    with pytest.raises(RuntimeError):
        server.stop()
"""HTTP server wrapper and the assembly of the web and v1 applications."""

from __future__ import annotations

import logging
from wsgiref.simple_server import WSGIRequestHandler, make_server

from flask import Blueprint, Flask, jsonify

from .common import NORMAL_API_GROUP
from .model_api import ModelApi
from .resource_api import LdapApi, RelationshipApi, ResourceApi
from .responses import request_ok

_log = logging.getLogger(__name__)


class _LoggingHandler(WSGIRequestHandler):
    """Sends access lines to the module logger instead of standard error."""

    def log_message(self, format, *args):  # noqa: A002 - signature fixed by the base class
        _log.info("%s - %s", self.address_string(), format % args)


class BaseServer:
    """Serves a WSGI application on one ``host:port`` address.

    ``port`` is updated to the bound port once the server listens, so an
    address ending in ``:0`` picks a free port.
    """

    def __init__(self, addr: str, app: Flask | None = None):
        host, sep, port = addr.rpartition(":")
        if not sep or not port.isdigit() or int(port) > 65535:
            raise ValueError(f"invalid address {addr!r}")
        self.host = host
        self.port = int(port)
        self.app = app if app is not None else Flask("cmdbservice")
        self._httpd = None

    def run(self) -> None:
        """Serve requests until ``stop`` is called."""
        if self._httpd is not None:
            raise RuntimeError("server is already running")
        httpd = make_server(self.host, self.port, self.app, handler_class=_LoggingHandler)
        self._httpd = httpd
        self.port = httpd.server_address[1]
        try:
            httpd.serve_forever()
        finally:
            httpd.server_close()
            self._httpd = None

    def stop(self) -> None:
        """Ask a running server to finish; raises RuntimeError when none is running."""
        httpd = self._httpd
        if httpd is None:
            raise RuntimeError("server is not running")
        httpd.shutdown()


def create_web_app(model_service, attribute_service, resource_service, sync_service,
                   relation_service, ldap_service) -> Flask:
    """Build the application that serves the web console API."""
    app = Flask("cmdbservice")
    ModelApi(model_service, attribute_service).register(app)
    ResourceApi(resource_service, sync_service, model_service).register(app)
    RelationshipApi(relation_service).register(app)
    LdapApi(ldap_service).register(app)
    return app


def create_api_app(v1_service) -> Flask:
    """Build the application that serves the v1 API."""
    app = Flask("cmdbservice")
    bp = Blueprint("v1_api", __name__, url_prefix=NORMAL_API_GROUP + "/v1")

    def get_app_tree():
        try:
            result = v1_service.get_app_tree()
        except Exception:  # the tree is sent as empty when it cannot be built
            result = None
        return jsonify(request_ok(result))

    bp.add_url_rule("/app-tree", "app_tree", get_app_tree, methods=["GET"])
    app.register_blueprint(bp)
    return app
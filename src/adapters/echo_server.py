"""HTTP echo service.

Every request is answered with its own body, byte for byte, and the request's
Content-Type. `X-Echo-Method` / `X-Echo-Path` report what the server saw.
`GET /healthz` is the only route that does not echo.
"""

from __future__ import annotations

import logging
import ssl
import threading
from urllib.parse import quote

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import NotFound
from werkzeug.serving import BaseWSGIServer, make_server

from adapters.tls import load_tls_context
from core.config import AppSettings
from core.domain.method import HttpMethod

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# The WSGI server cannot tunnel, so CONNECT is not echoed.
ECHO_METHODS = [method.value for method in HttpMethod if method is not HttpMethod.CONNECT]

# Header values must stay ASCII without control characters: re-encode the
# decoded path, keep already-encoded query escapes.
_PATH_SAFE = "/:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?%"


def _echo_path() -> str:
    path = quote(request.path, safe=_PATH_SAFE)
    if request.query_string:
        return f"{path}?{quote(request.query_string, safe=_QUERY_SAFE)}"
    return path


def _echo_response() -> Response:
    body = request.get_data(cache=False)
    response = Response(
        body,
        status=200,
        content_type=request.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE,
    )
    response.headers["X-Echo-Method"] = request.method
    response.headers["X-Echo-Path"] = _echo_path()
    return response


def create_app(settings: AppSettings | None = None) -> Flask:
    settings = settings or AppSettings()

    app = Flask(__name__)
    # 0 disables the limit.
    app.config["MAX_CONTENT_LENGTH"] = settings.max_body_bytes or None

    @app.get("/healthz")
    def healthz() -> Response:
        return jsonify(status="ok")

    @app.route("/", defaults={"path": ""}, methods=ECHO_METHODS)
    @app.route("/<path:path>", methods=ECHO_METHODS)
    def echo(path: str) -> Response:
        return _echo_response()

    @app.errorhandler(NotFound)
    def echo_unmatched(error: NotFound) -> Response | NotFound:
        # Paths the `path` converter rejects, e.g. a decoded newline.
        if request.method not in ECHO_METHODS:
            return error
        return _echo_response()

    @app.after_request
    def log_request(response: Response) -> Response:
        logger.info(
            "%s %s -> %d (%s bytes)",
            request.method,
            _echo_path(),
            response.status_code,
            response.content_length if response.content_length is not None else "?",
        )
        return response

    return app


class EchoServer:
    """Threaded echo server bound to `settings.host:settings.port`."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        host: str | None = None,
        port: int | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.host = host if host is not None else self._settings.host
        self.tls: ssl.SSLContext | None = load_tls_context(self._settings)
        self._server: BaseWSGIServer = make_server(
            self.host,
            port if port is not None else self._settings.port,
            create_app(self._settings),
            threaded=True,
            ssl_context=self.tls,
        )
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        return self._server.server_port

    @property
    def scheme(self) -> str:
        return "https" if self.tls is not None else "http"

    def serve_forever(self) -> None:
        logger.info("Echo server listening on %s://%s:%d", self.scheme, self.host, self.port)
        try:
            self._server.serve_forever()
        finally:
            self._server.server_close()

    def start(self) -> threading.Thread:
        """Serve from a daemon thread; returns the thread."""

        self._thread = threading.Thread(target=self.serve_forever, name="echo-server", daemon=True)
        self._thread.start()
        return self._thread

    def shutdown(self) -> None:
        self._server.shutdown()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def __enter__(self) -> "EchoServer":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

"""
Tests for the RPC client against a local HTTP server.
"""

from __future__ import annotations

import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlparse

import pytest

from shorthand.adapters.rpc_client import RPCClient, RPCUnavailableError


class _Handler(BaseHTTPRequestHandler):
    """Answers according to the request path."""

    requests: list[tuple[str, str]] = []

    def do_GET(self) -> None:
        url = urlparse(self.path)
        query = parse_qs(url.query).get("q", [""])[0]
        type(self).requests.append((url.path, query))

        if url.path == "/repo":
            self._send(200, json.dumps({"complete": True, "repos": [{"description": "desc"}]}).encode())
        elif url.path == "/issue":
            self._send(200, json.dumps({"complete": False}).encode())
        elif url.path == "/garbage":
            self._send(200, b"not json")
        else:
            self._send(500, b"{}")

    def _send(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:
        pass


@pytest.fixture()
def server_url():
    _Handler.requests = []
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


def _closed_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class TestRPCClient:
    def test_complete_result(self, server_url: str):
        result = RPCClient(server_url, timeout=2).query("/repo", "a/b")
        assert result.complete
        assert result.repos[0].description == "desc"
        assert _Handler.requests == [("/repo", "a/b")]

    def test_query_is_encoded(self, server_url: str):
        RPCClient(server_url, timeout=2).query("/issue", "a/b#12")
        assert _Handler.requests == [("/issue", "a/b#12")]

    def test_pending_result(self, server_url: str):
        result = RPCClient(server_url, timeout=2).query("/issue", "a/b#1")
        assert not result.complete
        assert result.error == ""

    def test_http_error(self, server_url: str):
        result = RPCClient(server_url, timeout=2).query("/projects", "x")
        assert result.complete
        assert result.error.startswith("RPC service error: 500")

    def test_undecodable_body(self, server_url: str):
        result = RPCClient(server_url, timeout=2).query("/garbage", "x")
        assert result.complete
        assert result.error.startswith("unmarshal error:")

    def test_connection_refused(self):
        client = RPCClient(f"http://127.0.0.1:{_closed_port()}")
        with pytest.raises(RPCUnavailableError):
            client.query("/repo", "a/b")

    def test_disabled(self):
        client = RPCClient("")
        assert not client.enabled
        with pytest.raises(RPCUnavailableError):
            client.query("/repo", "a/b")

    def test_trailing_slash_stripped(self):
        assert RPCClient("http://127.0.0.1:7347/").base_url == "http://127.0.0.1:7347"

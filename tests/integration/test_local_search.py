"""로컬 HTTP 서버를 상대로 한 통합 테스트

실제 curl_cffi 세션으로 요청을 보내지만 외부 네트워크는 쓰지 않습니다.
(127.0.0.1 에 임시 서버를 띄움)
"""

from __future__ import annotations

import json
import socket
import threading
import time
from ipaddress import IPv4Address
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlparse

import pytest

from cocktaildb.client import CocktailSearchClient, SharedHttpClient
from cocktaildb.engine import CancellationSignal, ErrorKind

pytestmark = pytest.mark.integration


class _Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"
    routes: dict = {}
    seen: list = []
    ports: list = []

    def do_GET(self):
        parsed = urlparse(self.path)
        self.ports.append(self.client_address[1])
        self.seen.append(parse_qs(parsed.query, keep_blank_values=True))
        status, body, delay = self.routes.get(parsed.path, (404, b"not found", 0.0))
        if delay:
            time.sleep(delay)
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        try:
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server():
    handler = type("Handler", (_Handler,), {"routes": {}, "seen": [], "ports": []})
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    httpd.daemon_threads = True
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield httpd, handler
    finally:
        httpd.shutdown()
        httpd.server_close()


@pytest.fixture
def transport():
    client = SharedHttpClient(max_idle=2)
    yield client
    client.close()


def _base(httpd) -> str:
    host, port = httpd.server_address[:2]
    return f"http://{host}:{port}"


def test_search_against_local_server(server, transport):
    httpd, handler = server
    body = json.dumps({"drinks": [{"strDrink": "Margarita", "strDrinkThumb": "http://x/m.jpg"}]}).encode()
    handler.routes["/search.php"] = (200, body, 0.0)

    client = CocktailSearchClient(transport=transport, endpoint=f"{_base(httpd)}/search.php", timeout_s=5.0)
    outcome = client.search(CancellationSignal(), "margarita", IPv4Address("192.0.2.1"))

    assert outcome.is_ok
    assert outcome.value.drinks[0].name == "Margarita"
    assert handler.seen[0] == {"s": ["margarita"], "userip": ["192.0.2.1"]}
    assert transport.idle_sessions == 1


def test_sequential_searches_reuse_connection(server, transport):
    """풀에서 빌린 세션은 워커 스레드가 달라도 같은 keep-alive 커넥션을 씀"""
    httpd, handler = server
    handler.routes["/search.php"] = (200, b'{"drinks":null}', 0.0)

    client = CocktailSearchClient(transport=transport, endpoint=f"{_base(httpd)}/search.php", timeout_s=5.0)
    for _ in range(4):
        assert client.search(CancellationSignal(), "margarita").is_ok

    assert len(handler.ports) == 4
    assert len(set(handler.ports)) == 1
    assert transport.idle_sessions == 1


def test_null_drinks_against_local_server(server, transport):
    httpd, handler = server
    handler.routes["/search.php"] = (200, b'{"drinks":null}', 0.0)

    client = CocktailSearchClient(transport=transport, endpoint=f"{_base(httpd)}/search.php", timeout_s=5.0)
    outcome = client.search(CancellationSignal(), "")

    assert outcome.value.drinks == []
    assert handler.seen[0] == {"s": [""]}


def test_malformed_body_against_local_server(server, transport):
    httpd, handler = server
    handler.routes["/search.php"] = (200, b"<html>maintenance</html>", 0.0)

    client = CocktailSearchClient(transport=transport, endpoint=f"{_base(httpd)}/search.php", timeout_s=5.0)
    outcome = client.search(CancellationSignal(), "margarita")

    assert outcome.kind is ErrorKind.DECODE


def test_http_error_status_against_local_server(server, transport):
    httpd, _ = server
    client = CocktailSearchClient(transport=transport, endpoint=f"{_base(httpd)}/missing.php", timeout_s=5.0)

    outcome = client.search(CancellationSignal(), "margarita")

    assert outcome.kind is ErrorKind.TRANSPORT
    assert outcome.error.details["status_code"] == 404


def test_connection_refused_is_transport_error(transport):
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()

    client = CocktailSearchClient(transport=transport, endpoint=f"http://127.0.0.1:{port}/search.php", timeout_s=2.0)
    outcome = client.search(CancellationSignal(), "margarita")

    assert outcome.kind is ErrorKind.TRANSPORT


def test_cancel_waits_for_in_flight_request(server, transport):
    httpd, handler = server
    handler.routes["/search.php"] = (200, b'{"drinks":null}', 0.5)

    client = CocktailSearchClient(transport=transport, endpoint=f"{_base(httpd)}/search.php", timeout_s=5.0)
    signal = CancellationSignal()
    threading.Timer(0.05, signal.cancel, args=("caller aborted",)).start()

    start = time.perf_counter()
    outcome = client.search(signal, "margarita")
    elapsed = time.perf_counter() - start

    assert outcome.is_cancelled
    assert outcome.error.reason == "caller aborted"
    assert elapsed >= 0.4
